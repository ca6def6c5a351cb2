# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database handle: engine, session factory, startup connection and schema."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from gameauth.domain.users.exceptions import StoreUnavailableError
from gameauth.shared.config import DatabaseConfig
from gameauth.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _is_sqlite_memory(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _engine_kwargs(config: DatabaseConfig) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"echo": False, "future": True, "pool_pre_ping": True}
    if config.is_sqlite():
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
    if not _is_sqlite_memory(config.url or ""):
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )
    return kwargs


def _set_sqlite_pragmas(dbapi_conn, _) -> None:
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.execute("PRAGMA busy_timeout=30000;")
    finally:
        cur.close()


def _log_failed_attempt(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        f"db.connect: attempt {retry_state.attempt_number} failed "
        f"({type(exc).__name__ if exc else 'unknown'}), retrying"
    )


class Database:
    """Process-wide connection handle.

    Built once at startup and passed to the repositories. ``connect()`` must
    complete before any session can be opened; ``dispose()`` runs once at
    shutdown.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self.engine: Engine = create_engine(config.url, **_engine_kwargs(config))
        if config.is_sqlite():
            event.listen(self.engine, "connect", _set_sqlite_pragmas)
        self._sessions = scoped_session(
            sessionmaker(
                bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
            )
        )
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def display_url(self) -> str:
        return self.engine.url.render_as_string(hide_password=True)

    def ping(self) -> None:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def connect(self) -> None:
        """Wait for the database, then ensure the schema exists.

        Retries a fixed number of times at a fixed interval so the service
        tolerates a database that starts slightly later. Exhaustion raises
        ``StoreUnavailableError``, which is fatal to startup.
        """

        attempts = self._config.connect_retries
        logger.info(f"db.connect: connecting to {self.display_url} (max {attempts} attempts)")
        retrying = Retrying(
            stop=stop_after_attempt(attempts),
            wait=wait_fixed(self._config.connect_retry_interval),
            retry=retry_if_exception_type((OperationalError, InterfaceError)),
            before_sleep=_log_failed_attempt,
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    self.ping()
        except SQLAlchemyError as exc:
            logger.error(f"db.connect: giving up after {attempts} attempts")
            raise StoreUnavailableError(context={"attempts": attempts}) from exc

        logger.info("db.connect: connected")
        self.init_schema()
        self._ready = True

    def init_schema(self) -> None:
        # create_all issues CREATE TABLE only for tables that are missing.
        from gameauth.infrastructure.db import models  # noqa: F401

        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as exc:
            logger.error(f"db.schema: creation failed ({type(exc).__name__})")
            raise StoreUnavailableError() from exc
        logger.info("Database schema ensured")

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        if not self._ready:
            raise StoreUnavailableError(context={"reason": "not_connected"})
        session = self._sessions()
        logger.debug("db.session: opened scoped session")
        try:
            yield session
            session.commit()
            logger.debug("db.session: committed scoped session")
        except Exception as exc:
            logger.debug(f"db.session: {type(exc).__name__}, rolling back")
            session.rollback()
            raise
        finally:
            session.close()
            self._sessions.remove()

    def dispose(self) -> None:
        self._ready = False
        self._sessions.remove()
        self.engine.dispose()
        logger.info("db: connection pool disposed")
