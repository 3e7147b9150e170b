#!/usr/bin/env python3
"""
Create Main Admin Script.

Creates the protected ``admin`` superadmin account directly in the
database. Useful for initial setup when no admin exists. Running it again
is harmless: an existing ``admin`` account is left untouched.

Usage:
    python auto/create_admin.py
    python auto/create_admin.py --email admin@example.com --password Secret123

Environment Variables:
    ADMIN_EMAIL: Admin email (default: none)
    ADMIN_PASSWORD: Admin password (default: auto-generated)
"""

from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from asyncio import run as asyncio_run
from os import environ
from pathlib import Path
from secrets import token_urlsafe
from sys import exit as sys_exit
from sys import path as sys_path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys_path.insert(0, str(project_root))

from app.configs import settings  # noqa: E402
from app.db import Database  # noqa: E402
from app.errors import BaseAppError  # noqa: E402
from app.repositories import UserRepository  # noqa: E402
from app.services.user import ensure_main_admin  # noqa: E402


def generate_secure_password(length: int = 16) -> str:
    """
    Generate a secure random password.

    Parameters
    ----------
    length : int
        Length of the random part (default: 16).

    Returns
    -------
    str
        Secure password.
    """
    password = token_urlsafe(length)
    return f"Admin{password[:12]}!1"


def parse_args() -> Namespace:
    """
    Parse command line arguments.

    Returns
    -------
    argparse.Namespace
        Parsed arguments with defaults applied.
    """
    parser = ArgumentParser(
        description=f"Create the main '{settings.PROTECTED_USERNAME}' superadmin account.",
        formatter_class=RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Auto-generated password
  python auto/create_admin.py

  # Explicit credentials
  python auto/create_admin.py -e admin@mysite.com -p MySecurePass123

  # Create tables first (development databases without migrations)
  python auto/create_admin.py --init-db
        """,
    )
    parser.add_argument(
        "-e",
        "--email",
        default=environ.get("ADMIN_EMAIL"),
        help="Admin email (default: ADMIN_EMAIL env var)",
    )
    parser.add_argument(
        "-p",
        "--password",
        default=environ.get("ADMIN_PASSWORD"),
        help="Admin password (default: ADMIN_PASSWORD env var or auto-generated)",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create missing tables before seeding",
    )
    return parser.parse_args()


async def main() -> int:
    """
    Run the admin creation process.

    Returns
    -------
    int
        Exit code (0 for success, 1 for error).
    """
    args = parse_args()
    auto_generated = args.password is None
    password = args.password or generate_secure_password()

    database = Database()
    try:
        if args.init_db:
            await database.init_models()
        async with database.transaction() as session:
            admin, created = await ensure_main_admin(UserRepository(session), password, args.email)
    except BaseAppError as e:
        print(f"\n❌ Error: {e.detail}")
        return 1
    finally:
        await database.close()

    if not created:
        print(f"ℹ️  '{admin.username}' already exists (role: {admin.role}); nothing to do.")
        return 0

    print("\n✅ Main admin created successfully!")
    print(f"   ID:       {admin.id}")
    print(f"   Username: {admin.username}")
    print(f"   Role:     {admin.role}")
    if auto_generated:
        print(f"   Password: {password}")
        print("\n⚠️  NOTE: This password was auto-generated. Save it now!")
    print("\nYou can now login with:")
    print("  curl -X POST 'http://localhost:8000/api/auth/login' \\")
    print("    -H 'Content-Type: application/json' \\")
    print(f"    -d '{{\"loginIdentifier\": \"{admin.username}\", \"password\": \"YOUR_PASSWORD\"}}'")
    return 0


if __name__ == "__main__":
    sys_exit(asyncio_run(main()))
