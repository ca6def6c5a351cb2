# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets

from gameauth.domain.users.entities import SessionToken
from gameauth.domain.users.exceptions import (
    HashingError,
    InvalidCredentialsError,
    NotFoundError,
)
from gameauth.domain.users.repositories import PasswordHasher, TokenCodec, UserRepository
from gameauth.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenCodec,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._decoy_hash: str | None = None

    def _decoy(self) -> str:
        # Verified against when the username is unknown so both failure paths
        # do the same hashing work.
        if self._decoy_hash is None:
            try:
                self._decoy_hash = self._password_hasher.hash(secrets.token_urlsafe(16))
            except HashingError:
                logger.warning("auth.login: decoy hash unavailable, unknown-user path is faster")
                return ""
        return self._decoy_hash

    def execute(self, username: str, password: str) -> SessionToken:
        try:
            user = self._users.find_by_username(username)
        except NotFoundError:
            self._password_hasher.verify(password, self._decoy())
            raise InvalidCredentialsError() from None

        if not self._password_hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()

        return self._tokens.issue(user.id)
