# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from gameauth.shared.errors.base import DomainError, InfrastructureError


class DuplicateUsernameError(DomainError):
    code = "username_taken"
    status = HTTPStatus.CONFLICT


class NotFoundError(DomainError):
    """Lookup miss inside the store. Never surfaced past the use cases."""

    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class UnauthenticatedError(DomainError):
    code = "unauthenticated"
    status = HTTPStatus.UNAUTHORIZED


class InvalidTokenError(UnauthenticatedError):
    code = "invalid_token"


class ExpiredTokenError(UnauthenticatedError):
    code = "token_expired"


class HashingError(InfrastructureError):
    code = "hashing_failed"
    status = HTTPStatus.INTERNAL_SERVER_ERROR


class StoreUnavailableError(InfrastructureError):
    code = "store_unavailable"
    status = HTTPStatus.SERVICE_UNAVAILABLE


__all__ = [
    "DuplicateUsernameError",
    "ExpiredTokenError",
    "HashingError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "NotFoundError",
    "StoreUnavailableError",
    "UnauthenticatedError",
]
