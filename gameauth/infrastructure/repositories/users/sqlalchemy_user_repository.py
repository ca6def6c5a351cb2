# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from gameauth.domain.users.entities import User as DomainUser
from gameauth.domain.users.exceptions import (
    DuplicateUsernameError,
    NotFoundError,
    StoreUnavailableError,
)
from gameauth.domain.users.repositories import UserRepository
from gameauth.infrastructure.db.models import User
from gameauth.infrastructure.db.session import Database
from gameauth.shared.logging import logger

# SQLSTATE class 23 "integrity constraint violation", subclass unique_violation.
PG_UNIQUE_VIOLATION = "23505"
SQLITE_UNIQUE_VIOLATIONS = frozenset({"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"})


def is_unique_violation(exc: IntegrityError) -> bool:
    """Classify an IntegrityError by the driver's structured error code.

    psycopg exposes ``sqlstate`` (psycopg2: ``pgcode``); sqlite3 exposes
    ``sqlite_errorname``.
    """

    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == PG_UNIQUE_VIOLATION
    return getattr(orig, "sqlite_errorname", None) in SQLITE_UNIQUE_VIOLATIONS


def _to_domain(row: User) -> DomainUser:
    created_at = row.created_at
    if created_at.tzinfo is None:
        # SQLite hands back naive timestamps; they are stored as UTC.
        created_at = created_at.replace(tzinfo=UTC)
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=created_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database) -> None:
        self._database = database

    def create(self, username: str, password_hash: str) -> DomainUser:
        try:
            with self._database.session_scope() as session:
                row = User(
                    username=username,
                    password_hash=password_hash,
                    created_at=datetime.now(UTC),
                )
                session.add(row)
                session.flush()
                user = _to_domain(row)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                logger.info(f"users.create: username taken username={username!r}")
                raise DuplicateUsernameError() from exc
            logger.error("users.create: integrity error other than uniqueness")
            raise StoreUnavailableError() from exc
        except SQLAlchemyError as exc:
            logger.error(f"users.create: backend failure ({type(exc).__name__})")
            raise StoreUnavailableError() from exc

        logger.info(f"users.create: created user_id={user.id} username={username!r}")
        return user

    def find_by_username(self, username: str) -> DomainUser:
        try:
            with self._database.session_scope() as session:
                row = session.scalars(
                    select(User).where(User.username == username)
                ).one_or_none()
                user = _to_domain(row) if row is not None else None
        except SQLAlchemyError as exc:
            logger.error(f"users.find_by_username: backend failure ({type(exc).__name__})")
            raise StoreUnavailableError() from exc

        if user is None:
            raise NotFoundError()
        return user
