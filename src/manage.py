"""Storefront database management CLI.

Creates and drops the storefront schema and seeds the administrator account.
Reuses the setup_db/drop_db utilities in ``storefront.utils.db``.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Create the admin account
"""

import argparse
import sys

from rich.console import Console

console = Console()


def setup_database():
    """Create every storefront table."""
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    console.print("Initializing storefront domain...")
    storefront.init()
    console.print("Creating storefront database schema...")
    setup_db(storefront)
    console.print("[green]  storefront schema ready.[/green]")


def drop_database():
    """Drop every storefront table."""
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    console.print("Initializing storefront domain...")
    storefront.init()
    console.print("Dropping storefront database schema...")
    drop_db(storefront)
    console.print("[yellow]  storefront schema dropped.[/yellow]")


def seed(email=None, password=None):
    """Create the administrator account if it does not exist yet."""
    from storefront.domain import storefront
    from storefront.identity.seeding import seed_admin

    storefront.init()
    with storefront.domain_context():
        admin_id = seed_admin(email=email, password=password)
    console.print(f"[green]Admin account ready:[/green] {admin_id}")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed", help="Create the administrator account")
    seed_parser.add_argument("--email", help="Admin email (default: SEED_ADMIN_EMAIL)")
    seed_parser.add_argument("--password", help="Admin password (default: SEED_ADMIN_PASSWORD)")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed(args.email, args.password)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
