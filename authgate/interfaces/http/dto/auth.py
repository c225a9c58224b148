from __future__ import annotations

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from authgate.shared.errors.validation_types import ValidationErrorType

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
PASSWORD_MIN_LENGTH = 8


class RegisterRequestDTO(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(min_length=3, max_length=30)
    email: EmailStr = Field(max_length=254)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not USERNAME_PATTERN.match(value):
            raise PydanticCustomError(
                ValidationErrorType.USERNAME_INVALID_CHARS.value,
                "Username can only contain letters, numbers and underscores",
                {"pattern": USERNAME_PATTERN.pattern},
            )
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_TOO_SHORT.value,
                "Password must be at least {min_length} characters long",
                {"min_length": PASSWORD_MIN_LENGTH},
            )

        if not re.search(r"[A-Z]", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_UPPERCASE.value,
                "Password must contain at least one uppercase letter",
                {},
            )

        if not re.search(r"[a-z]", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_LOWERCASE.value,
                "Password must contain at least one lowercase letter",
                {},
            )

        if not re.search(r"\d", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_DIGIT.value,
                "Password must contain at least one digit",
                {},
            )

        return value


class LoginRequestDTO(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr = Field(max_length=254)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class UserPublicDTO(BaseModel):
    """Public view of a user. There is deliberately no password field."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    username: str
    email: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserEnvelopeDTO(BaseModel):
    user: UserPublicDTO


class AuthSuccessDTO(BaseModel):
    status: Literal["success"] = "success"
    token: str
    data: UserEnvelopeDTO


class CurrentUserDTO(BaseModel):
    status: Literal["success"] = "success"
    data: UserEnvelopeDTO


class MessageDTO(BaseModel):
    status: Literal["success"] = "success"
    message: str
