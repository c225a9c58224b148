# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:
    """A registered identity.

    ``password_hash`` is ``None`` unless the read explicitly asked for it;
    only the login path does so.
    """

    id: int
    username: str
    email: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    password_hash: str | None = None

    def without_password(self) -> User:
        if self.password_hash is None:
            return self
        return replace(self, password_hash=None)


@dataclass(slots=True, frozen=True)
class NewUser:

    username: str
    email: str
    password_hash: str


@dataclass(slots=True, frozen=True)
class IssuedToken:

    token: str
    user_id: int
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class TokenClaims:

    subject: str
    issued_at: datetime
    expires_at: datetime
