# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authgate.domain.users.entities import IssuedToken, NewUser, User
from authgate.domain.users.exceptions import EmailTakenError, UsernameTakenError
from authgate.domain.users.repositories import PasswordHasher, TokenService, UserRepository


class RegisterUserUseCase:
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

    def execute(self, username: str, email: str, password: str) -> tuple[User, IssuedToken]:
        email = email.strip().lower()
        if self._users.find_by_username(username):
            raise UsernameTakenError()
        if self._users.find_by_email(email):
            raise EmailTakenError()

        hashed = self._password_hasher.hash(password)
        # A concurrent registration can still win the race; the store
        # adapter turns the unique-constraint failure into the same errors.
        persisted = self._users.add(NewUser(username=username, email=email, password_hash=hashed))
        token = self._tokens.issue(persisted.id)
        return persisted.without_password(), token
