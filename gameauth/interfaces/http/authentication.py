# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import g, request

from gameauth.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from gameauth.domain.users.exceptions import UnauthenticatedError
from gameauth.infrastructure.observability import record_auth_event
from gameauth.shared.logging import logger

F = TypeVar("F", bound=Callable[..., Any])


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def current_user_id() -> int:
    return cast(int, g.user_id)


def make_auth_required(authenticate: AuthenticateUserUseCase) -> Callable[[F], F]:
    """Build the decorator every protected endpoint is wrapped with.

    On success the caller's id is stored on ``flask.g.user_id``; otherwise an
    ``UnauthenticatedError`` subclass propagates to the error handler (401).
    """

    def auth_required(f: F) -> F:
        @wraps(f)
        def inner(*a, **kw):
            token = bearer_token()
            if not token:
                logger.warning(
                    f"No bearer token on {request.method} {request.path} "
                    f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
                )
                record_auth_event("authenticate", "missing")
                raise UnauthenticatedError()

            try:
                user_id = authenticate.execute(token)
            except UnauthenticatedError as exc:
                logger.warning(f"Auth failed ({exc.code}) on {request.method} {request.path}")
                record_auth_event("authenticate", exc.code)
                raise

            g.user_id = user_id
            record_auth_event("authenticate", "ok")
            logger.debug(f"Auth OK: user={user_id} {request.method} {request.path}")
            return f(*a, **kw)

        return cast(F, inner)

    return auth_required


__all__ = ["bearer_token", "current_user_id", "make_auth_required"]
