from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from flask import Flask

from gameauth.app import create_app
from gameauth.infrastructure.db import Database
from gameauth.shared.config import AppConfig, DatabaseConfig, HashingConfig, TokenConfig

# pbkdf2 with a tiny work factor keeps hashing out of the test runtime.
FAST_HASH_METHOD = "pbkdf2:sha256:1000"
TEST_SECRET = "test-secret-0123456789abcdefghijklmnopqrstuvwxyz"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        APP_ENV="test",
        database=DatabaseConfig(
            DATABASE_URL=f"sqlite:///{tmp_path / 'gameauth.db'}",
            DB_CONNECT_RETRIES=3,
            DB_CONNECT_RETRY_INTERVAL=0,
        ),
        token=TokenConfig(TOKEN_SECRET=TEST_SECRET, TOKEN_TTL_SECONDS=3600),
        hashing=HashingConfig(PASSWORD_HASH_METHOD=FAST_HASH_METHOD),
    )


@pytest.fixture()
def database(config: AppConfig) -> Iterator[Database]:
    db = Database(config.database)
    db.connect()
    yield db
    db.dispose()


@pytest.fixture()
def app(config: AppConfig) -> Iterator[Flask]:
    flask_app = create_app(config)
    flask_app.config.update(TESTING=True)
    yield flask_app
    flask_app.extensions["gameauth.container"].database.dispose()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
