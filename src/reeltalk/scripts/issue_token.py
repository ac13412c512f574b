# src/reeltalk/scripts/issue_token.py
"""Issue a bearer token for a user, creating the account if needed.

Sign-in happens outside this service; this script stands in for it during
development and operations work.

    python -m reeltalk.scripts.issue_token alice@example.com "Alice"
"""

from __future__ import annotations

import argparse
import sys

from reeltalk.core.errors import ReeltalkError
from reeltalk.core.security import create_access_token
from reeltalk.db.session import SessionLocal, create_tables
from reeltalk.services.sessions import SessionService


def issue_token(email: str, display_name: str) -> str:
    """Open a fresh session for the user and return its token."""
    db = SessionLocal()
    try:
        sessions = SessionService(db)
        user = sessions.get_or_create_user(email, display_name)
        session = sessions.create_session(user.id)
        return create_access_token(session.id)
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue a Reeltalk bearer token")
    parser.add_argument("email", help="Account email address")
    parser.add_argument("display_name", help="Name shown next to the user's posts")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first (local SQLite setups).",
    )
    args = parser.parse_args()

    if args.create_tables:
        create_tables()
    try:
        token = issue_token(args.email, args.display_name)
    except ReeltalkError as exc:
        print(f"[issue_token] ERROR: {exc.message}", file=sys.stderr)
        sys.exit(1)
    print(token)


if __name__ == "__main__":
    main()
