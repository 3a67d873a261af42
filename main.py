#!/usr/bin/env python3
"""
UFind -- command-line administration for the lost-and-found backend.

Usage:
  python main.py create-user --username maria --email maria@ufind.local --role ROLE_SECRETARY
  python main.py create-user --username root --email root@ufind.local --role ROLE_ADMIN --password-stdin

The password is prompted for (no echo) unless --password-stdin is given, in
which case the first line of stdin is used. Accounts are created through the
same service as POST /api/v1/auth/register, so role validation and duplicate
detection behave identically.

Environment variables:
  DATABASE_URL  Target database (default: SQLite file next to the project).
  SECRET_KEY    Required unless DEBUG=true (see core/config.py).
"""

import argparse
import getpass
import sys

from auth.models import Role
from auth.service import register_user
from auth.store import UserStore
from core.config import get_settings
from core.errors import AppError


def _read_password(from_stdin: bool) -> str:
    if from_stdin:
        return sys.stdin.readline().rstrip("\n")
    first = getpass.getpass("Password: ")
    second = getpass.getpass("Repeat password: ")
    if first != second:
        print("  [!] Passwords do not match.")
        sys.exit(1)
    return first


def _create_user(args: argparse.Namespace) -> int:
    password = _read_password(args.password_stdin)
    if len(password) < 8:
        print("  [!] Password must be at least 8 characters.")
        return 1

    store = UserStore(get_settings().database_url)
    try:
        register_user(store, args.username, args.email, password, args.role)
    except AppError as exc:
        print(f"  [!] {exc.message}")
        return 1
    finally:
        store.close()

    print(f"  Created {args.role} account for {args.email}.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ufind",
        description="UFind lost-and-found administration.",
    )
    sub = parser.add_subparsers(dest="command")

    create = sub.add_parser("create-user", help="Create a secretary or admin account.")
    create.add_argument("--username", required=True)
    create.add_argument("--email", required=True)
    create.add_argument(
        "--role",
        required=True,
        help=f"One of: {', '.join(r.value for r in Role)}",
    )
    create.add_argument(
        "--password-stdin",
        action="store_true",
        help="Read the password from the first line of stdin instead of prompting.",
    )
    create.set_defaults(func=_create_user)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
