# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import IssuedToken, NewUser, TokenClaims, User


class UserRepository(Protocol):
    def find_by_id(self, user_id: int) -> User | None: ...
    def find_by_email(self, email: str, *, include_password: bool = False) -> User | None: ...
    def find_by_username(self, username: str) -> User | None: ...
    def add(self, user: NewUser) -> User: ...
    def set_active(self, user_id: int, active: bool) -> User: ...
    def set_password(self, user_id: int, password: str) -> bool: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenService(Protocol):
    def issue(self, user_id: int) -> IssuedToken: ...
    def verify(self, token: str) -> TokenClaims: ...
