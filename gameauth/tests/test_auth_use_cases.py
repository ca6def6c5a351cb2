from __future__ import annotations

from datetime import UTC, datetime

import pytest

from gameauth.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from gameauth.application.use_cases.users.login_user import LoginUserUseCase
from gameauth.application.use_cases.users.register_user import RegisterUserUseCase
from gameauth.domain.users.entities import User
from gameauth.domain.users.exceptions import (
    DuplicateUsernameError,
    ExpiredTokenError,
    HashingError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    StoreUnavailableError,
)
from gameauth.domain.users.repositories import PasswordHasher, UserRepository
from gameauth.infrastructure.auth.jwt_token_codec import JwtTokenCodec

SECRET = "use-case-secret-0123456789abcdefghijklmnopqrstuvwxyz"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._seq = 1
        self.fail_with: Exception | None = None

    def create(self, username: str, password_hash: str) -> User:
        if self.fail_with is not None:
            raise self.fail_with
        if username in self._users:
            raise DuplicateUsernameError()
        user = User(
            id=self._seq,
            username=username,
            password_hash=password_hash,
            created_at=datetime.now(UTC),
        )
        self._seq += 1
        self._users[username] = user
        return user

    def find_by_username(self, username: str) -> User:
        if self.fail_with is not None:
            raise self.fail_with
        try:
            return self._users[username]
        except KeyError:
            raise NotFoundError() from None

    def __len__(self) -> int:
        return len(self._users)


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.verified: list[str] = []
        self.broken = False

    def hash(self, password: str) -> str:
        if self.broken:
            raise HashingError()
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verified.append(hashed)
        return hashed == f"hashed:{password}"


class SpyTokenCodec(JwtTokenCodec):
    def __init__(self, clock) -> None:
        super().__init__(SECRET, 3600, clock=clock)
        self.issued: list[int] = []

    def issue(self, user_id: int):
        self.issued.append(user_id)
        return super().issue(user_id)


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def tokens(clock) -> SpyTokenCodec:
    return SpyTokenCodec(clock)


@pytest.fixture()
def register(users, tokens, hasher) -> RegisterUserUseCase:
    return RegisterUserUseCase(users=users, tokens=tokens, password_hasher=hasher)


@pytest.fixture()
def login(users, tokens, hasher) -> LoginUserUseCase:
    return LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher)


@pytest.fixture()
def authenticate(tokens) -> AuthenticateUserUseCase:
    return AuthenticateUserUseCase(tokens=tokens)


def test_register_login_authenticate_flow(register, login, authenticate, users) -> None:
    registered = register.execute("alice", "s3cr3t!")

    assert registered.user_id == 1
    assert users.find_by_username("alice").password_hash == "hashed:s3cr3t!"
    assert authenticate.execute(registered.token) == 1

    logged_in = login.execute("alice", "s3cr3t!")

    assert logged_in.user_id == 1
    assert authenticate.execute(logged_in.token) == 1


def test_register_stores_hash_not_password(register, users) -> None:
    register.execute("alice", "pw1")

    assert users.find_by_username("alice").password_hash != "pw1"


def test_register_duplicate_username(register, tokens, users) -> None:
    register.execute("alice", "pw1")

    with pytest.raises(DuplicateUsernameError):
        register.execute("alice", "pw2")

    assert len(users) == 1
    assert tokens.issued == [1]


def test_register_hashing_failure_creates_nothing(register, users, hasher, tokens) -> None:
    hasher.broken = True

    with pytest.raises(HashingError):
        register.execute("alice", "pw1")

    assert len(users) == 0
    assert tokens.issued == []


def test_register_store_failure_issues_no_token(register, users, tokens) -> None:
    users.fail_with = StoreUnavailableError()

    with pytest.raises(StoreUnavailableError):
        register.execute("alice", "pw1")

    assert tokens.issued == []


def test_login_wrong_password_and_unknown_user_are_indistinguishable(
    register, login, hasher, tokens
) -> None:
    register.execute("alice", "pw1")
    tokens.issued.clear()

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.execute("alice", "nope")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        login.execute("bob", "pw1")

    assert type(wrong_password.value) is type(unknown_user.value)
    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
    assert str(wrong_password.value) == str(unknown_user.value)
    assert tokens.issued == []
    # Both paths ran a password verification.
    assert len(hasher.verified) == 2


def test_login_unknown_user_hides_lookup_miss(login) -> None:
    with pytest.raises(InvalidCredentialsError) as exc_info:
        login.execute("ghost", "pw1")

    assert exc_info.value.__cause__ is None
    assert exc_info.value.__suppress_context__


def test_login_unknown_user_with_broken_hasher_still_invalid_credentials(
    login, hasher
) -> None:
    hasher.broken = True

    with pytest.raises(InvalidCredentialsError):
        login.execute("ghost", "pw1")


def test_login_propagates_store_failure(login, users) -> None:
    users.fail_with = StoreUnavailableError()

    with pytest.raises(StoreUnavailableError):
        login.execute("alice", "pw1")


def test_login_issues_fresh_token_each_time(register, login, clock) -> None:
    register.execute("alice", "pw1")

    first = login.execute("alice", "pw1")
    clock.advance(5)
    second = login.execute("alice", "pw1")

    assert first.token != second.token
    assert second.expires_at > first.expires_at


def test_authenticate_rejects_expired_token(register, authenticate, clock) -> None:
    token = register.execute("alice", "pw1").token

    clock.advance(3600)

    with pytest.raises(ExpiredTokenError):
        authenticate.execute(token)


def test_authenticate_rejects_tampered_token(register, authenticate) -> None:
    token = register.execute("alice", "pw1").token

    header, _, signature = token.split(".")
    other_payload = register.execute("bob", "pw2").token.split(".")[1]

    with pytest.raises(InvalidTokenError):
        authenticate.execute(f"{header}.{other_payload}.{signature}")


def test_authenticate_does_not_consult_store(register, authenticate, users) -> None:
    token = register.execute("alice", "pw1").token
    users.fail_with = StoreUnavailableError()

    assert authenticate.execute(token) == 1
