# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import g, request

from authgate.application.services.session_guard import SessionGuard
from authgate.domain.users.entities import User

F = TypeVar("F", bound=Callable[..., Any])


def require_session(guard: SessionGuard) -> Callable[[F], F]:
    """Run ``guard`` before the view and expose the user on ``flask.g``."""

    def decorator(view: F) -> F:
        @wraps(view)
        def inner(*args: Any, **kwargs: Any) -> Any:
            user = guard.authenticate(request)
            g.current_user = user
            g.user_id = user.id
            return view(*args, **kwargs)

        return cast(F, inner)

    return decorator


def current_user() -> User:
    """Return the user resolved by :func:`require_session` for this request."""
    user = getattr(g, "current_user", None)
    if user is None:
        raise RuntimeError("current_user() used outside a guarded view")
    return cast(User, user)


__all__ = ["current_user", "require_session"]
