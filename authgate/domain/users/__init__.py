# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import IssuedToken, NewUser, TokenClaims, User
from .repositories import PasswordHasher, TokenService, UserRepository

__all__ = [
    "IssuedToken",
    "NewUser",
    "PasswordHasher",
    "TokenClaims",
    "TokenService",
    "User",
    "UserRepository",
]
