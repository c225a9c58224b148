# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
import traceback
from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from authgate.shared.logging import logger

from .base import AppError

_CAMEL_BOUNDARY = re.compile(r"[^a-z0-9]+")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict())
    return response, error.status


def handle_http_exception(exc: HTTPException) -> tuple[Response, int]:
    code = _CAMEL_BOUNDARY.sub("_", (exc.name or "http_error").lower()).strip("_")
    status = exc.code or HTTPStatus.INTERNAL_SERVER_ERROR
    payload = {
        "status": "fail" if status < 500 else "error",
        "error": code,
        "message": exc.description or exc.name,
    }
    response = jsonify(payload)
    return response, status


def register_error_handler(
    app: Flask,
    *,
    expose_details: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:
    """Install the single error boundary for the application.

    Views and middleware raise; only these handlers turn failures into
    responses. ``expose_details`` adds the exception text and traceback to
    500 payloads and must stay off in production.
    """

    def _handle_app_error(exc: AppError):
        if exc.is_operational:
            logger.warning(
                f"Handled application error {exc.code} on {request.method} {request.path}"
            )
        else:
            logger.opt(exception=exc).error(
                f"Infrastructure error {exc.code} on {request.method} {request.path}"
            )
            if not expose_details:
                return _generic_failure()
        return handle_app_error(exc)

    def _handle_unexpected(exc: Exception):
        ip_address = _client_ip()
        user_id = getattr(g, "user_id", None)
        logger.opt(exception=exc).error(
            f"Unhandled exception: {type(exc).__name__} on {request.method} {request.path} "
            f"from {ip_address}, user={user_id}"
        )
        if expose_details:
            payload = {
                "status": "error",
                "error": "internal_error",
                "message": "Something went wrong",
                "detail": str(exc),
                "stack": traceback.format_exception(type(exc), exc, exc.__traceback__),
            }
            return jsonify(payload), default_status
        return _generic_failure()

    def _generic_failure():
        payload = {
            "status": "error",
            "error": "internal_error",
            "message": "Something went wrong",
        }
        return jsonify(payload), default_status

    app.register_error_handler(AppError, _handle_app_error)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(Exception, _handle_unexpected)


__all__ = ["handle_app_error", "handle_http_exception", "register_error_handler"]
