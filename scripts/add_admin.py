#!/usr/bin/env python3
"""
Create an ADMIN user, or promote an existing user to ADMIN.

Registration over HTTP always creates USER accounts; this is the only way to
obtain an administrator.

Usage:
  python scripts/add_admin.py --email admin@example.com --name "Admin" [--password secret]
  python scripts/add_admin.py --email someone@example.com --promote
  python scripts/add_admin.py --list
"""
from __future__ import annotations

import argparse
import secrets
import sys

from fintrack.core.security import hash_password
from fintrack.db.models import ROLE_ADMIN
from fintrack.db.session import get_session
from fintrack.domain.slugs import new_token
from fintrack.domain.validation import validate_all
from fintrack.repositories.user_repository import UserRepository


def gen_password(length: int = 16) -> str:
    return secrets.token_urlsafe(length)[:length]


def main() -> None:
    ap = argparse.ArgumentParser(description="Create or promote an administrator")
    ap.add_argument("--email", help="Administrator e-mail")
    ap.add_argument("--name", default="Administrator", help="Display name")
    ap.add_argument("--password", help="Password (default: random 16 chars)")
    ap.add_argument("--promote", action="store_true", help="Promote an existing user instead of creating one")
    ap.add_argument("--list", action="store_true", help="List every user with its role and exit")
    args = ap.parse_args()

    if args.list:
        with get_session() as session:
            for user in UserRepository(session).list_users():
                print(f"{user.role:<6} {user.email}  {user.id}")
        return

    email = (args.email or "").strip()
    if validate_all({"email": email}, {"email": "required|email"}):
        raise SystemExit("Invalid e-mail")

    with get_session() as session:
        repo = UserRepository(session)
        existing = repo.get_user_by_email(email)
        if args.promote:
            if not existing:
                raise SystemExit(f"User '{email}' does not exist")
            repo.update_user(existing.id, {"role": ROLE_ADMIN})
            print(f"OK: {email} promoted to ADMIN")
            return
        if existing:
            raise SystemExit(f"User '{email}' already exists (use --promote)")
        password = (args.password or "").strip() or gen_password()
        user = repo.create_user(new_token(), email, args.name, hash_password(password), role=ROLE_ADMIN)

    print("OK: administrator created")
    print(f"  ID: {user.id}")
    print(f"  Email: {email}")
    if not args.password:
        print(f"  Password: {password}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
