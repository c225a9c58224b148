# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask, Response
from flask_cors import CORS

from authgate.container import Container
from authgate.shared.config import AppConfig, load_config
from authgate.shared.logging import logger, setup_logging
from authgate.shared.middleware.error_handler import configure_error_handling
from authgate.shared.middleware.origin_guard import configure_origin_guard
from authgate.shared.middleware.request_logger import configure_request_logging


def _configure_security_headers(app: Flask, *, enable_hsts: bool) -> None:
    @app.after_request
    def _add_security_headers(resp: Response) -> Response:
        resp.headers.setdefault("X-Frame-Options", "DENY")

        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-site")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=()",
        )

        if enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp


def create_app(
    config: AppConfig | None = None,
    *,
    container: Container | None = None,
    configure_logging: bool = True,
) -> Flask:
    config = config or (container.config if container else load_config())
    container = container or Container(config)

    if configure_logging:
        setup_logging("DEBUG" if config.debug_logging else None)

    container.database.init_db()

    app = Flask(__name__)
    app.json.sort_keys = False  # type: ignore[attr-defined]
    app.extensions["authgate"] = container

    configure_error_handling(app, expose_details=not config.is_production())
    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_origin_guard(
        app,
        enabled=config.is_production(),
        allowed_origin=config.security.client_url,
    )
    _configure_security_headers(app, enable_hsts=config.security.enable_hsts)

    CORS(
        app,
        resources={r"/*": {"origins": config.cors_origins}},
        supports_credentials=True,
    )

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    _config = load_config()
    create_app(_config).run(
        host=_config.host, port=_config.port, debug=not _config.is_production()
    )
