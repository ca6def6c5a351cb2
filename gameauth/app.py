# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit

from flask import Flask

from gameauth.container import Container
from gameauth.shared.config import AppConfig, load_config
from gameauth.shared.logging import logger, setup_logging
from gameauth.shared.middleware.error_handler import configure_error_handling
from gameauth.shared.middleware.request_logger import configure_request_logging


def create_app(config: AppConfig | None = None, container: Container | None = None) -> Flask:
    """Build the WSGI app.

    Blocks until the database is reachable and the schema exists; a
    ``StoreUnavailableError`` here means the process must not start serving.
    """

    config = config or load_config()
    container = container or Container(config)
    setup_logging(debug_mode=config.debug_logging)

    container.database.connect()

    app = Flask(__name__)
    app.extensions["gameauth.container"] = container
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("Cache-Control", "no-store")
        return resp

    logger.info("Flask app initialized")
    return app


def main() -> None:
    config = load_config()
    app = create_app(config)
    atexit.register(app.extensions["gameauth.container"].database.dispose)
    logger.info(f"Server starting on port {config.port}...")
    app.run(host=config.host, port=config.port)


if __name__ == "__main__":
    main()
