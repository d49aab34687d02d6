"""Marketplace database management CLI.

Creates and drops the relational schema for the marketplace domain.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    from marketplace.domain import marketplace
    from marketplace.utils.db import setup_db

    print("Initializing marketplace domain...")
    marketplace.init()
    touched = setup_db(marketplace)
    if not touched:
        print("  No relational database configured (is PROTEAN_ENV set?).")
    else:
        print(f"  Schema ready on: {', '.join(touched)}")
    print("Done.")


def drop_database():
    from marketplace.domain import marketplace
    from marketplace.utils.db import drop_db

    print("Initializing marketplace domain...")
    marketplace.init()
    touched = drop_db(marketplace)
    if not touched:
        print("  No relational database configured (is PROTEAN_ENV set?).")
    else:
        print(f"  Schema dropped on: {', '.join(touched)}")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Marketplace database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
