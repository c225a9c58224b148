# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed session tokens.

Tokens are HS256 JWTs carrying ``sub`` (the user id as a string), ``iat`` and
``exp``. Nothing is stored server side: a token stays valid until ``exp`` no
matter what happens to the session that produced it.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from authgate.domain.users.entities import IssuedToken, TokenClaims
from authgate.domain.users.exceptions import TokenExpiredError, TokenInvalidError
from authgate.domain.users.repositories import TokenService

Clock = Callable[[], datetime]

REQUIRED_CLAIMS = ("sub", "iat", "exp")


def utc_now() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    def __init__(
        self,
        *,
        secret: str,
        ttl: timedelta,
        algorithm: str = "HS256",
        clock: Clock = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        if ttl <= timedelta(0):
            raise ValueError("token ttl must be positive")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: int) -> IssuedToken:
        issued_at = int(self._clock().timestamp())
        expires_at = issued_at + int(self._ttl.total_seconds())
        claims = {"sub": str(user_id), "iat": issued_at, "exp": expires_at}
        token = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        return IssuedToken(
            token=token,
            user_id=user_id,
            issued_at=datetime.fromtimestamp(issued_at, UTC),
            expires_at=datetime.fromtimestamp(expires_at, UTC),
        )

    def verify(self, token: str) -> TokenClaims:
        try:
            # Expiry is checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": list(REQUIRED_CLAIMS),
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
            subject = payload["sub"]
            issued_at = int(payload["iat"])
            expires_at = int(payload["exp"])
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError(context={"reason": type(exc).__name__}) from exc
        except (TypeError, ValueError) as exc:
            raise TokenInvalidError(context={"reason": "malformed_claims"}) from exc

        if not isinstance(subject, str) or not subject:
            raise TokenInvalidError(context={"reason": "malformed_claims"})

        now = self._clock().timestamp()
        if expires_at <= now:
            raise TokenExpiredError()

        return TokenClaims(
            subject=subject,
            issued_at=datetime.fromtimestamp(issued_at, UTC),
            expires_at=datetime.fromtimestamp(expires_at, UTC),
        )


__all__ = ["Clock", "JwtTokenService", "utc_now"]
