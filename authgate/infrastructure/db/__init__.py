# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .error_mapper import store_errors, translate_store_error
from .session import Base, Database, build_engine

__all__ = ["Base", "Database", "build_engine", "store_errors", "translate_store_error"]
