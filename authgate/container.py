"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from authgate.application.services.password_hashing import BcryptPasswordHasher
from authgate.application.services.session_guard import SessionGuard
from authgate.application.services.tokens import Clock, JwtTokenService, utc_now
from authgate.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from authgate.application.use_cases.users.login_user import LoginUserUseCase
from authgate.application.use_cases.users.register_user import RegisterUserUseCase
from authgate.infrastructure.db import Database
from authgate.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from authgate.interfaces.http.controllers.auth_controller import AuthController
from authgate.interfaces.http.controllers.misc_controller import MiscController
from authgate.interfaces.http.credentials import (
    BearerHeaderExtractor,
    CookieCredentialTransport,
    CookieExtractor,
)
from authgate.shared.config import AppConfig


class Container:
    def __init__(self, config: AppConfig, *, clock: Clock = utc_now) -> None:
        self.config = config
        self._clock = clock

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(rounds=self.config.security.bcrypt_rounds)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database, self.password_hasher)

    @cached_property
    def token_service(self) -> JwtTokenService:
        security = self.config.security
        return JwtTokenService(
            secret=security.jwt_secret,
            ttl=security.token_ttl,
            algorithm=security.jwt_algorithm,
            clock=self._clock,
        )

    @cached_property
    def credential_transport(self) -> CookieCredentialTransport:
        return CookieCredentialTransport(
            cookie_name=self.config.security.cookie_name,
            secure=self.config.cookie_secure,
            samesite=self.config.cookie_samesite,
        )

    @cached_property
    def session_guard(self) -> SessionGuard:
        return SessionGuard(
            extractors=[
                CookieExtractor(self.config.security.cookie_name),
                BearerHeaderExtractor(),
            ],
            tokens=self.token_service,
            users=self.user_repository,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def get_current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(users=self.user_repository)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            get_current_user_use_case=self.get_current_user_use_case,
            guard=self.session_guard,
            transport=self.credential_transport,
            url_prefix=f"{self.config.api_prefix}/auth",
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database, url_prefix=self.config.api_prefix)
