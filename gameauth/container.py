"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from gameauth.application.services.password_hashing import WerkzeugPasswordHasher
from gameauth.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from gameauth.application.use_cases.users.login_user import LoginUserUseCase
from gameauth.application.use_cases.users.register_user import RegisterUserUseCase
from gameauth.infrastructure.auth.jwt_token_codec import JwtTokenCodec
from gameauth.infrastructure.db import Database
from gameauth.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from gameauth.interfaces.http.controllers.auth_controller import AuthController
from gameauth.interfaces.http.controllers.misc_controller import MiscController
from gameauth.shared.config import AppConfig


class Container:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(
            method=self.config.hashing.method,
            salt_length=self.config.hashing.salt_length,
        )

    @cached_property
    def token_codec(self) -> JwtTokenCodec:
        return JwtTokenCodec(
            self.config.token.secret,
            self.config.token.ttl_seconds,
            algorithm=self.config.token.algorithm,
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_codec,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_codec,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def authenticate_user_use_case(self) -> AuthenticateUserUseCase:
        return AuthenticateUserUseCase(tokens=self.token_codec)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            authenticate_use_case=self.authenticate_user_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database)
