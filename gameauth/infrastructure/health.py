# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from gameauth.infrastructure.db import Database


def check_database(database: Database) -> bool:
    if not database.is_ready:
        return False
    database.ping()
    return True


__all__ = ["check_database"]
