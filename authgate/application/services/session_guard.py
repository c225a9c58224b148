# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Request authentication.

``SessionGuard.authenticate`` runs four steps in order and stops at the first
failure:

1. extract a token with the first extractor that finds one,
2. verify signature and expiry,
3. load the user named by the token (without its password hash),
4. refuse deactivated accounts.

Step 2 never touches the user store.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from authgate.domain.users.entities import User
from authgate.domain.users.exceptions import (
    AccountDeactivatedError,
    IdentityNotFoundError,
    MissingCredentialsError,
    TokenInvalidError,
)
from authgate.domain.users.repositories import TokenService, UserRepository
from authgate.shared.errors import AppError
from authgate.shared.logging import logger


class CredentialSource(Protocol):
    """What extractors read from; a Flask ``Request`` satisfies it."""

    @property
    def cookies(self) -> Mapping[str, str]: ...

    @property
    def headers(self) -> Mapping[str, str]: ...


class CredentialExtractor(Protocol):
    name: str

    def extract(self, source: CredentialSource) -> str | None: ...


class SessionGuard:
    def __init__(
        self,
        *,
        extractors: Sequence[CredentialExtractor],
        tokens: TokenService,
        users: UserRepository,
    ) -> None:
        if not extractors:
            raise ValueError("at least one credential extractor is required")
        self._extractors = tuple(extractors)
        self._tokens = tokens
        self._users = users

    def extract(self, source: CredentialSource) -> tuple[str, str] | None:
        for extractor in self._extractors:
            token = extractor.extract(source)
            if token:
                return extractor.name, token
        return None

    def authenticate(self, source: CredentialSource) -> User:
        try:
            return self._authenticate(source)
        except AppError as exc:
            logger.warning(f"session.guard: rejected reason={exc.code}")
            raise

    def _authenticate(self, source: CredentialSource) -> User:
        found = self.extract(source)
        if found is None:
            raise MissingCredentialsError()
        via, token = found

        claims = self._tokens.verify(token)

        try:
            user_id = int(claims.subject)
        except ValueError as exc:
            raise TokenInvalidError(context={"reason": "malformed_subject"}) from exc

        user = self._users.find_by_id(user_id)
        if user is None:
            raise IdentityNotFoundError()

        if not user.is_active:
            raise AccountDeactivatedError()

        logger.debug(f"session.guard: ok user={user.id} via={via}")
        return user.without_password()


__all__ = ["CredentialExtractor", "CredentialSource", "SessionGuard"]
