# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users import SessionToken, User

__all__ = ["SessionToken", "User"]
