# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authgate.shared.errors.base import DomainError, ErrorKind


class UsernameTakenError(DomainError):
    kind = ErrorKind.CONFLICT
    code = "username_taken"
    message = "Username is already taken"


class EmailTakenError(DomainError):
    kind = ErrorKind.CONFLICT
    code = "email_taken"
    message = "Email is already registered"


class InvalidCredentialsError(DomainError):
    kind = ErrorKind.UNAUTHENTICATED
    code = "invalid_credentials"
    message = "Incorrect email or password"


class MissingCredentialsError(DomainError):
    kind = ErrorKind.UNAUTHENTICATED
    code = "no_credentials"
    message = "You are not logged in. Please log in to get access"


class TokenInvalidError(DomainError):
    kind = ErrorKind.UNAUTHENTICATED
    code = "token_invalid"
    message = "Invalid token. Please log in again"


class TokenExpiredError(DomainError):
    kind = ErrorKind.UNAUTHENTICATED
    code = "token_expired"
    message = "Your token has expired. Please log in again"


class IdentityNotFoundError(DomainError):
    kind = ErrorKind.UNAUTHENTICATED
    code = "user_no_longer_exists"
    message = "The user belonging to this token no longer exists"


class AccountDeactivatedError(DomainError):
    kind = ErrorKind.FORBIDDEN
    code = "account_deactivated"
    message = "Your account has been deactivated"


class InvalidIdentifierError(DomainError):
    kind = ErrorKind.VALIDATION
    code = "invalid_identifier"
    message = "Invalid identifier format"


class UserNotFoundError(DomainError):
    kind = ErrorKind.VALIDATION
    code = "user_not_found"
    message = "No user matches the given identifier"
