"""Use-case for reading the authenticated user."""

from __future__ import annotations

from authgate.domain.users.entities import User
from authgate.domain.users.exceptions import IdentityNotFoundError
from authgate.domain.users.repositories import UserRepository


class GetCurrentUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise IdentityNotFoundError()
        return user.without_password()
