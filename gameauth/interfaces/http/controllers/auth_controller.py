# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from gameauth.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from gameauth.application.use_cases.users.login_user import LoginUserUseCase
from gameauth.application.use_cases.users.register_user import RegisterUserUseCase
from gameauth.domain.users.entities import SessionToken
from gameauth.infrastructure.observability import record_auth_event
from gameauth.interfaces.http.authentication import current_user_id, make_auth_required
from gameauth.interfaces.http.dto.auth import (
    AuthSuccessDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
    SessionDTO,
)
from gameauth.shared.errors import AppError
from gameauth.shared.errors.validation import raise_validation_error
from gameauth.shared.logging import logger


def _token_response(token: SessionToken, status: HTTPStatus) -> tuple[Response, int]:
    payload = AuthSuccessDTO(
        user_id=token.user_id, token=token.token, expires_at=token.expires_at
    ).model_dump(mode="json")
    return jsonify(payload), int(status)


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        authenticate_use_case: AuthenticateUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self.auth_required = make_auth_required(authenticate_use_case)

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            token = self._register_use_case.execute(dto.username, dto.password)
        except AppError as exc:
            record_auth_event("register", exc.code)
            raise

        record_auth_event("register", "ok")
        logger.info(f"auth.register: ok user_id={token.user_id}")
        return _token_response(token, HTTPStatus.CREATED)

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            token = self._login_use_case.execute(dto.username, dto.password)
        except AppError as exc:
            record_auth_event("login", exc.code)
            logger.info(f"auth.login: failed ({exc.code})")
            raise

        record_auth_event("login", "ok")
        logger.info(f"auth.login: ok user_id={token.user_id}")
        return _token_response(token, HTTPStatus.OK)

    def session(self) -> tuple[Response, int]:
        payload = SessionDTO(user_id=current_user_id()).model_dump()
        return jsonify(payload), int(HTTPStatus.OK)

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/session", view_func=self.auth_required(self.session), methods=["GET"]
        )
        return bp
