# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask

from authgate.shared.errors import register_error_handler


def configure_error_handling(app: Flask, *, expose_details: bool = False) -> None:
    register_error_handler(app, expose_details=expose_details)
