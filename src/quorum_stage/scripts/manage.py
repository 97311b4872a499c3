# src/quorum_stage/scripts/manage.py
"""Maintenance commands: create the schema and manage admin accounts.

Usage::

    python -m quorum_stage.scripts.manage init-db
    python -m quorum_stage.scripts.manage create-admin --name Ada --email ada@example.com --password ...
    python -m quorum_stage.scripts.manage promote ada@example.com
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from sqlalchemy.orm import Session

from quorum_stage.core.errors import NotFoundError, QuorumError
from quorum_stage.db.session import SessionLocal, create_tables
from quorum_stage.models import User
from quorum_stage.models.user import ROLE_ADMIN, ROLE_USER
from quorum_stage.services import users as user_service

logger = logging.getLogger(__name__)


def set_role(db: Session, email: str, role: str) -> User:
    """Change the role of the account registered under ``email``."""
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if user is None:
        raise NotFoundError(f"No account with email {email}")
    user.role = role
    if role == ROLE_ADMIN and user.is_banned:
        # Admins cannot be banned, so promotion lifts any ban.
        user.is_banned = False
        user.ban_reason = None
        user.banned_at = None
        user.banned_by_id = None
    db.commit()
    db.refresh(user)
    logger.info("Set role of user %s to %s", user.id, role)
    return user


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quorum maintenance commands")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create all tables without running migrations.")

    create = commands.add_parser("create-admin", help="Register a new admin account.")
    create.add_argument("--name", required=True)
    create.add_argument("--email", required=True)
    create.add_argument("--password", required=True)

    promote = commands.add_parser("promote", help="Grant the admin role to an existing account.")
    promote.add_argument("email")

    demote = commands.add_parser("demote", help="Return an admin to the regular user role.")
    demote.add_argument("email")
    return parser


def main(argv: Sequence[str] | None = None, *, db: Session | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.command == "init-db":
        create_tables()
        print("Database initialized.")
        return 0

    session = db or SessionLocal()
    try:
        if args.command == "create-admin":
            user = user_service.create_user(
                session,
                name=args.name,
                email=args.email,
                password=args.password,
                role=ROLE_ADMIN,
            )
            print(f"Created admin {user.email} (id={user.id})")
        else:
            role = ROLE_ADMIN if args.command == "promote" else ROLE_USER
            user = set_role(session, args.email, role)
            print(f"{user.email} is now {user.role}")
    except QuorumError as exc:
        print(f"[manage] ERROR: {exc.detail}", file=sys.stderr)
        return 1
    finally:
        if db is None:
            session.close()
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
