# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case for resolving a bearer token to a user id."""

from __future__ import annotations

from gameauth.domain.users.repositories import TokenCodec


class AuthenticateUserUseCase:
    def __init__(self, *, tokens: TokenCodec) -> None:
        self._tokens = tokens

    def execute(self, token: str) -> int:
        # No store lookup: a removed user's token stays valid until it expires.
        return self._tokens.validate(token)
