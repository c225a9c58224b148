# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from flask import Response

from authgate.application.services.session_guard import CredentialSource
from authgate.domain.users.entities import IssuedToken

LOGGED_OUT_SENTINEL = "loggedout"
LOGOUT_COOKIE_TTL = timedelta(seconds=10)


class CookieExtractor:
    name = "cookie"

    def __init__(self, cookie_name: str) -> None:
        self._cookie_name = cookie_name

    def extract(self, source: CredentialSource) -> str | None:
        value = (source.cookies.get(self._cookie_name) or "").strip()
        if not value or value == LOGGED_OUT_SENTINEL:
            return None
        return value


class BearerHeaderExtractor:
    name = "bearer"

    def extract(self, source: CredentialSource) -> str | None:
        header = source.headers.get("Authorization") or ""
        scheme, _, value = header.partition(" ")
        if scheme.lower() != "bearer":
            return None
        return value.strip() or None


class CookieCredentialTransport:
    """Writes the session cookie.

    The cookie expires exactly when the token it carries does.
    """

    def __init__(self, *, cookie_name: str, secure: bool, samesite: str) -> None:
        if samesite == "None" and not secure:
            raise ValueError("SameSite=None cookies must be secure")
        self.cookie_name = cookie_name
        self._secure = secure
        self._samesite = samesite

    def attach(self, response: Response, issued: IssuedToken) -> None:
        response.set_cookie(
            self.cookie_name,
            issued.token,
            expires=issued.expires_at,
            httponly=True,
            secure=self._secure,
            samesite=self._samesite,
            path="/",
        )

    def clear(self, response: Response, *, now: datetime | None = None) -> None:
        now = now or datetime.now(UTC)
        response.set_cookie(
            self.cookie_name,
            LOGGED_OUT_SENTINEL,
            expires=now + LOGOUT_COOKIE_TTL,
            httponly=True,
            secure=self._secure,
            samesite=self._samesite,
            path="/",
        )


__all__ = [
    "LOGGED_OUT_SENTINEL",
    "BearerHeaderExtractor",
    "CookieCredentialTransport",
    "CookieExtractor",
]
