# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless session tokens (HMAC-signed JWT)."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC, datetime

import jwt

from gameauth.domain.users.entities import SessionToken
from gameauth.domain.users.exceptions import ExpiredTokenError, InvalidTokenError
from gameauth.domain.users.repositories import TokenCodec
from gameauth.shared.logging import logger

_REQUIRED_CLAIMS = ["sub", "exp"]


class JwtTokenCodec(TokenCodec):
    """Issues and validates tokens that carry ``sub`` (user id) and ``exp``.

    The codec never consults the user store: a token stays valid until
    ``exp`` even if its user has since been removed.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        *,
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("token ttl must be positive")
        self._secret = secret
        self._ttl_seconds = ttl_seconds
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, user_id: int) -> SessionToken:
        now = self._clock()
        # exp keeps the sub-second part so the token lives for the full ttl.
        expires_at = now + self._ttl_seconds
        issued_at = int(now)
        payload = {"sub": str(user_id), "iat": issued_at, "exp": expires_at}
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return SessionToken(
            user_id=user_id,
            token=token,
            expires_at=datetime.fromtimestamp(expires_at, UTC),
        )

    def validate(self, token: str) -> int:
        # Signature and structure first; expiry is checked against our own clock.
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            logger.debug(f"token: rejected ({type(exc).__name__})")
            raise InvalidTokenError() from exc

        expires_at = claims["exp"]
        if not isinstance(expires_at, int | float) or isinstance(expires_at, bool):
            logger.debug("token: rejected (non-numeric exp)")
            raise InvalidTokenError()

        if self._clock() >= expires_at:
            logger.debug(f"token: expired for sub={claims['sub']!r}")
            raise ExpiredTokenError()

        try:
            user_id = int(claims["sub"])
        except (TypeError, ValueError) as exc:
            logger.debug("token: rejected (unparseable sub)")
            raise InvalidTokenError() from exc

        return user_id


__all__ = ["JwtTokenCodec"]
