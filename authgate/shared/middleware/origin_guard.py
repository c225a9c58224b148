# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from urllib.parse import urlsplit

from flask import Flask, request

from authgate.shared.errors import OriginRejectedError
from authgate.shared.logging import logger

SAFE_METHODS: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")


def _origin_of(url: str) -> str | None:
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}".lower()


def is_allowed_origin(
    origin: str | None, referer: str | None, allowed_origin: str
) -> bool:
    """``Origin`` wins when present; otherwise the origin part of ``Referer``."""
    expected = allowed_origin.rstrip("/").lower()
    if origin:
        return origin.rstrip("/").lower() == expected
    if referer:
        return _origin_of(referer) == expected
    return False


def configure_origin_guard(app: Flask, *, enabled: bool, allowed_origin: str | None) -> None:
    if not enabled:
        return
    if not allowed_origin:
        raise ValueError("origin guard requires an allowed origin")

    @app.before_request
    def _check_origin() -> None:
        if request.method in SAFE_METHODS:
            return None
        origin = request.headers.get("Origin")
        referer = request.headers.get("Referer")
        if is_allowed_origin(origin, referer, allowed_origin):
            return None
        logger.warning(
            f"origin.guard: rejected {request.method} {request.path} "
            f"origin={origin!r} referer={referer!r}"
        )
        raise OriginRejectedError()


__all__ = ["SAFE_METHODS", "configure_origin_guard", "is_allowed_origin"]
