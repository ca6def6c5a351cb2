# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import SessionToken, User
from .exceptions import (
    DuplicateUsernameError,
    ExpiredTokenError,
    HashingError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from .repositories import PasswordHasher, TokenCodec, UserRepository

__all__ = [
    "DuplicateUsernameError",
    "ExpiredTokenError",
    "HashingError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "NotFoundError",
    "PasswordHasher",
    "SessionToken",
    "StoreUnavailableError",
    "TokenCodec",
    "UnauthenticatedError",
    "User",
    "UserRepository",
]
