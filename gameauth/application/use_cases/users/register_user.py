# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from gameauth.domain.users.entities import SessionToken
from gameauth.domain.users.repositories import PasswordHasher, TokenCodec, UserRepository


class RegisterUserUseCase:
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

    def execute(self, username: str, password: str) -> SessionToken:
        """Create the account and return its first token.

        Uniqueness is left to the store's constraint, so there is no lookup
        before the insert. Each step only runs if the previous one succeeded.
        """

        hashed = self._password_hasher.hash(password)
        user = self._users.create(username, hashed)
        return self._tokens.issue(user.id)
