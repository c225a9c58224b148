# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Administrative commands.

    python -m authgate.manage init-db
    python -m authgate.manage deactivate alice@example.com
    python -m authgate.manage activate alice@example.com
    python -m authgate.manage set-password alice@example.com 'N3wPassword'
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from authgate.container import Container
from authgate.domain.users.exceptions import UserNotFoundError
from authgate.infrastructure.audit import AuditAction, audit_log
from authgate.shared.config import load_config
from authgate.shared.errors import AppError
from authgate.shared.logging import logger, setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="authgate-manage", description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create database tables")

    for name, help_text in (
        ("activate", "re-enable an account"),
        ("deactivate", "disable an account; existing tokens stop working"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("email")

    set_password = sub.add_parser("set-password", help="replace an account password")
    set_password.add_argument("email")
    set_password.add_argument("password")
    return parser


def _user_id_for(container: Container, email: str) -> int:
    user = container.user_repository.find_by_email(email.strip().lower())
    if user is None:
        raise UserNotFoundError(context={"email": email})
    return user.id


def run(argv: Sequence[str] | None = None, *, container: Container | None = None) -> int:
    args = _build_parser().parse_args(argv)
    container = container or Container(load_config())
    container.database.init_db()

    try:
        if args.command == "init-db":
            print("database ready")
            return 0

        user_id = _user_id_for(container, args.email)

        if args.command in ("activate", "deactivate"):
            active = args.command == "activate"
            container.user_repository.set_active(user_id, active)
            audit_log(
                AuditAction.ACCOUNT_ACTIVATED if active else AuditAction.ACCOUNT_DEACTIVATED,
                user_id=user_id,
            )
            print(f"{args.email}: {'active' if active else 'deactivated'}")
            return 0

        changed = container.user_repository.set_password(user_id, args.password)
        if changed:
            audit_log(AuditAction.PASSWORD_CHANGED, user_id=user_id)
        print(f"{args.email}: {'password updated' if changed else 'password unchanged'}")
        return 0
    except AppError as exc:
        logger.warning(f"manage: {args.command} failed: {exc.code}")
        print(f"error: {exc.message}", file=sys.stderr)
        return 1


def main() -> None:
    setup_logging()
    sys.exit(run())


if __name__ == "__main__":
    main()
