from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask
from loguru import logger as loguru_logger

from gameauth.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from gameauth.application.use_cases.users.login_user import LoginUserUseCase
from gameauth.application.use_cases.users.register_user import RegisterUserUseCase
from gameauth.domain.users.entities import SessionToken
from gameauth.domain.users.exceptions import (
    DuplicateUsernameError,
    ExpiredTokenError,
    HashingError,
    InvalidCredentialsError,
    StoreUnavailableError,
)
from gameauth.interfaces.http.controllers.auth_controller import AuthController
from gameauth.shared.middleware.error_handler import configure_error_handling

EXPIRES = datetime(2030, 1, 1, tzinfo=UTC)


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _controller(
    flask_app: Flask,
    *,
    register: object | None = None,
    login: object | None = None,
    authenticate: object | None = None,
) -> AuthController:
    controller = AuthController(
        register_use_case=cast(RegisterUserUseCase, register or MagicMock()),
        login_use_case=cast(LoginUserUseCase, login or MagicMock()),
        authenticate_use_case=cast(AuthenticateUserUseCase, authenticate or MagicMock()),
    )
    flask_app.register_blueprint(controller.as_blueprint())
    return controller


def test_register_endpoint_returns_token(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.return_value = SessionToken(user_id=1, token="tok", expires_at=EXPIRES)
    _controller(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/register", json={"username": "alice", "password": "secret123"}
        )

    assert response.status_code == 201
    register.execute.assert_called_once_with("alice", "secret123")
    body = response.get_json()
    assert body["user_id"] == 1
    assert body["token"] == "tok"
    assert body["expires_at"].startswith("2030-01-01T00:00:00")


def test_login_endpoint_returns_token(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = SessionToken(user_id=9, token="tok9", expires_at=EXPIRES)
    _controller(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post("/api/login", json={"username": "alice", "password": "x"})

    assert response.status_code == 200
    assert response.get_json()["user_id"] == 9


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"username": "alice"},
        {"username": "al", "password": "secret123"},
        {"username": "bad name!", "password": "secret123"},
        {"username": "alice", "password": "short"},
        {"username": 123, "password": "secret123"},
    ],
)
def test_register_invalid_payload_returns_422(flask_app: Flask, payload: dict) -> None:
    register = MagicMock()
    _controller(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post("/api/register", json=payload)

    assert response.status_code == 422
    assert response.get_json()["error"] == "validation_error"
    register.execute.assert_not_called()


def test_validation_error_does_not_echo_password(flask_app: Flask) -> None:
    _controller(flask_app)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/register", json={"username": "alice", "password": "tiny5"}
        )

    assert response.status_code == 422
    assert "tiny5" not in response.get_data(as_text=True)
    assert response.get_json()["context"]["fields"] == ["password"]


def test_login_non_json_body_returns_422(flask_app: Flask) -> None:
    login = MagicMock()
    _controller(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post("/api/login", data="username=alice", content_type="text/plain")

    assert response.status_code == 422
    login.execute.assert_not_called()


@pytest.mark.parametrize(
    ("error", "status", "code"),
    [
        (DuplicateUsernameError(), 409, "username_taken"),
        (HashingError(), 500, "hashing_failed"),
        (StoreUnavailableError(), 503, "store_unavailable"),
    ],
)
def test_register_maps_errors(flask_app: Flask, error: Exception, status: int, code: str) -> None:
    register = MagicMock()
    register.execute.side_effect = error
    _controller(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/register", json={"username": "alice", "password": "secret123"}
        )

    assert response.status_code == status
    assert response.get_json() == {"error": code}


def test_login_invalid_credentials_returns_401(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = InvalidCredentialsError()
    _controller(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post("/api/login", json={"username": "alice", "password": "nope"})

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}


def test_session_requires_bearer_token(flask_app: Flask) -> None:
    authenticate = MagicMock()
    _controller(flask_app, authenticate=authenticate)

    with flask_app.test_client() as client:
        missing = client.get("/api/session")
        wrong_scheme = client.get("/api/session", headers={"Authorization": "Basic abc"})

    assert missing.status_code == 401
    assert missing.get_json() == {"error": "unauthenticated"}
    assert wrong_scheme.status_code == 401
    authenticate.execute.assert_not_called()


def test_session_returns_authenticated_user(flask_app: Flask) -> None:
    authenticate = MagicMock()
    authenticate.execute.return_value = 5
    _controller(flask_app, authenticate=authenticate)

    with flask_app.test_client() as client:
        response = client.get("/api/session", headers={"Authorization": "Bearer tok"})

    assert response.status_code == 200
    assert response.get_json() == {"user_id": 5}
    authenticate.execute.assert_called_once_with("tok")


def test_session_expired_token_returns_401(flask_app: Flask) -> None:
    authenticate = MagicMock()
    authenticate.execute.side_effect = ExpiredTokenError()
    _controller(flask_app, authenticate=authenticate)

    with flask_app.test_client() as client:
        response = client.get("/api/session", headers={"Authorization": "Bearer tok"})

    assert response.status_code == 401
    assert response.get_json() == {"error": "token_expired"}


def test_failed_login_does_not_log_submitted_username(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = InvalidCredentialsError()
    _controller(flask_app, login=login)
    messages: list[str] = []
    sink_id = loguru_logger.add(lambda msg: messages.append(str(msg)), level="DEBUG")

    try:
        with flask_app.test_client() as client:
            response = client.post(
                "/api/login", json={"username": "hunter2-typed-here", "password": "x"}
            )
    finally:
        loguru_logger.remove(sink_id)

    assert response.status_code == 401
    assert any("auth.login: failed (invalid_credentials)" in m for m in messages)
    assert not any("hunter2-typed-here" in m for m in messages)
