# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.exc import SQLAlchemyError

from gameauth.infrastructure.db import Database
from gameauth.infrastructure.health import check_database
from gameauth.shared.logging import logger


class MiscController:
    def __init__(self, *, database: Database) -> None:
        self._database = database

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        bp.add_url_rule("/metrics", view_func=self.metrics, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"status": "ok", "database": "ok"}
        try:
            healthy = check_database(self._database)
        except SQLAlchemyError as exc:
            logger.warning(f"health: database probe failed ({type(exc).__name__})")
            healthy = False
        if not healthy:
            status.update(status="degraded", database="unavailable")
            return jsonify(status), HTTPStatus.SERVICE_UNAVAILABLE
        return jsonify(status), HTTPStatus.OK

    def metrics(self):
        return Response(generate_latest(), content_type=CONTENT_TYPE_LATEST)
