# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Translate SQLAlchemy failures into application errors.

Repositories wrap every store call in :func:`store_errors`, so callers only
ever see :class:`~authgate.shared.errors.AppError` subclasses.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError, StatementError

from authgate.domain.users.exceptions import (
    EmailTakenError,
    InvalidIdentifierError,
    UsernameTakenError,
)
from authgate.shared.errors import AppError, InfrastructureError, ValidationFailedError
from authgate.shared.logging import logger

# Substrings identifying the violated unique constraint across SQLite
# ("UNIQUE constraint failed: users.email") and PostgreSQL
# ("violates unique constraint \"uq_users_email\"").
DUPLICATE_FIELD_MARKERS: dict[str, tuple[str, ...]] = {
    "email": ("users.email", "uq_users_email", "ix_users_email", "(email)"),
    "username": ("users.username", "uq_users_username", "ix_users_username", "(username)"),
}


def _duplicate_field(exc: IntegrityError) -> str | None:
    text = str(exc.orig if exc.orig is not None else exc)
    for field, markers in DUPLICATE_FIELD_MARKERS.items():
        if any(marker in text for marker in markers):
            return field
    return None


def translate_store_error(exc: SQLAlchemyError) -> AppError:
    if isinstance(exc, IntegrityError):
        field = _duplicate_field(exc)
        if field == "email":
            return EmailTakenError()
        if field == "username":
            return UsernameTakenError()
        return ValidationFailedError(
            "Stored data violates a constraint", code="constraint_violation"
        )
    if isinstance(exc, DataError):
        return InvalidIdentifierError()
    if isinstance(exc, StatementError) and isinstance(exc.orig, (TypeError, ValueError)):
        return InvalidIdentifierError()
    return InfrastructureError("The user store is unavailable", code="store_unavailable")


@contextmanager
def store_errors() -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        translated = translate_store_error(exc)
        logger.warning(f"db.error: {type(exc).__name__} translated to {translated.code}")
        raise translated from exc


__all__ = ["DUPLICATE_FIELD_MARKERS", "store_errors", "translate_store_error"]
