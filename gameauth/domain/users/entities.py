# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    # Never serialized outward; excluded from repr so it cannot leak into logs.
    password_hash: str = field(repr=False)
    created_at: datetime


@dataclass(slots=True, frozen=True)
class SessionToken:
    """A signed, self-contained bearer credential. Nothing about it is stored."""

    user_id: int
    token: str = field(repr=False)
    expires_at: datetime
