# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select

from authgate.domain.users.entities import NewUser
from authgate.domain.users.entities import User as DomainUser
from authgate.domain.users.exceptions import UserNotFoundError
from authgate.domain.users.repositories import PasswordHasher, UserRepository
from authgate.infrastructure.db.error_mapper import store_errors
from authgate.infrastructure.db.models import User
from authgate.infrastructure.db.session import Database
from authgate.shared.logging import logger


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_domain(row: User, *, include_password: bool = False) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        email=row.email,
        is_active=row.is_active,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
        password_hash=row.password_hash if include_password else None,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database, password_hasher: PasswordHasher) -> None:
        self._db = database
        self._password_hasher = password_hasher

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with store_errors(), self._db.session_scope() as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def find_by_email(self, email: str, *, include_password: bool = False) -> DomainUser | None:
        with store_errors(), self._db.session_scope() as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            if not row:
                return None
            return _to_domain(row, include_password=include_password)

    def find_by_username(self, username: str) -> DomainUser | None:
        with store_errors(), self._db.session_scope() as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            return _to_domain(row) if row else None

    def add(self, user: NewUser) -> DomainUser:
        with store_errors(), self._db.session_scope() as session:
            row = User(
                username=user.username,
                email=user.email,
                password_hash=user.password_hash,
                is_active=True,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _to_domain(row)

    def set_active(self, user_id: int, active: bool) -> DomainUser:
        with store_errors(), self._db.session_scope() as session:
            row = session.get(User, user_id)
            if row is None:
                raise UserNotFoundError(context={"user_id": user_id})
            row.is_active = active
            session.flush()
            session.refresh(row)
            logger.info(f"users.set_active: user={user_id} active={active}")
            return _to_domain(row)

    def set_password(self, user_id: int, password: str) -> bool:
        """Store a new hash unless ``password`` already matches the current one."""
        with store_errors(), self._db.session_scope() as session:
            row = session.get(User, user_id)
            if row is None:
                raise UserNotFoundError(context={"user_id": user_id})
            if self._password_hasher.verify(password, row.password_hash):
                return False
            row.password_hash = self._password_hasher.hash(password)
            logger.info(f"users.set_password: user={user_id} rehashed")
            return True
