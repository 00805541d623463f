"""Storefront management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Counters, admin account and demo catalogue
"""

import argparse
import sys


def setup_database():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating storefront database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping storefront database schema...")
    drop_db(storefront)
    print("Done.")


def seed(with_demo_catalogue):
    from storefront.domain import storefront
    from storefront.seed import initialise_store

    storefront.init()
    with storefront.domain_context():
        initialise_store(with_demo_catalogue=with_demo_catalogue)
    print("Store initialised.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    seed_parser = subparsers.add_parser("seed", help="Create counters, the admin account and demo products")
    seed_parser.add_argument(
        "--no-demo",
        action="store_true",
        help="Skip the demo catalogue",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed(with_demo_catalogue=False if args.no_demo else None)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
