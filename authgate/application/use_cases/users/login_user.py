# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authgate.domain.users.entities import IssuedToken, User
from authgate.domain.users.exceptions import AccountDeactivatedError, InvalidCredentialsError
from authgate.domain.users.repositories import PasswordHasher, TokenService, UserRepository


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, email: str, password: str) -> tuple[User, IssuedToken]:
        user = self._users.find_by_email(email.strip().lower(), include_password=True)
        password_valid = (
            user is not None
            and user.password_hash is not None
            and self._password_hasher.verify(password, user.password_hash)
        )

        # Unknown email and wrong password must look the same to the caller.
        if not password_valid:
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDeactivatedError()

        token = self._tokens.issue(user.id)
        return user.without_password(), token
