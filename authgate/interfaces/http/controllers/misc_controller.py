# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from authgate.infrastructure.db import Database
from authgate.infrastructure.health import check_database
from authgate.shared.logging import logger


class MiscController:
    def __init__(self, *, database: Database, url_prefix: str = "") -> None:
        self._database = database
        self._url_prefix = url_prefix

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__, url_prefix=self._url_prefix or None)
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {
            "status": "success",
            "message": "Server is running",
            "timestamp": datetime.now(UTC).isoformat(),
        }
        try:
            check_database(self._database)
            status["database"] = "ok"
        except SQLAlchemyError as exc:
            logger.warning(f"health: database check failed: {type(exc).__name__}")
            status["database"] = "unavailable"
        return jsonify(status)
