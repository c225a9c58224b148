# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any, cast


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    UNEXPECTED = "unexpected"


STATUS_BY_KIND: dict[ErrorKind, HTTPStatus] = {
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.UNAUTHENTICATED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorKind.UNEXPECTED: HTTPStatus.INTERNAL_SERVER_ERROR,
}


@dataclass(slots=True, eq=False)
class AppError(Exception):
    """Tagged application error; the HTTP status follows from ``kind``."""

    kind: ErrorKind
    code: str
    message: str
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    @property
    def status(self) -> HTTPStatus:
        return STATUS_BY_KIND[self.kind]

    @property
    def is_operational(self) -> bool:
        return self.kind is not ErrorKind.UNEXPECTED

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": "fail" if self.is_operational else "error",
            "error": self.code,
            "message": self.message,
        }
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    """Error whose ``kind``/``code``/``message`` defaults live on the subclass."""

    def __init__(
        self,
        message: str | None = None,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_kind = cast(ErrorKind, getattr(self, "kind", ErrorKind.VALIDATION))
        resolved_code = cast(str, getattr(self, "code", "domain_error"))
        resolved_message = message or cast(str, getattr(self, "message", resolved_code))
        super().__init__(
            kind=resolved_kind,
            code=resolved_code,
            message=resolved_message,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        message: str = "Internal infrastructure failure",
        code: str = "infrastructure_error",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            kind=ErrorKind.UNEXPECTED, code=code, message=message, context=context
        )


class ValidationFailedError(AppError):
    def __init__(
        self,
        message: str = "Invalid input data",
        code: str = "validation_error",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            kind=ErrorKind.VALIDATION, code=code, message=message, context=context
        )


class OriginRejectedError(AppError):
    def __init__(self) -> None:
        super().__init__(
            kind=ErrorKind.FORBIDDEN,
            code="origin_validation_failed",
            message="Origin validation failed",
        )


__all__ = [
    "STATUS_BY_KIND",
    "AppError",
    "DomainError",
    "ErrorKind",
    "InfrastructureError",
    "OriginRejectedError",
    "ValidationFailedError",
]
