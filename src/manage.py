"""Distribution database management CLI.

Provides commands to create and drop the database schema for the
distribution domain, reusing the setup_db/drop_db utilities.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_databases():
    """Create the database schema for the distribution domain."""
    from distribution.domain import distribution
    from distribution.utils.db import setup_db

    print("Initializing distribution domain...")
    distribution.init()
    print("Creating distribution database schema...")
    setup_db(distribution)
    print("Done.")


def drop_databases():
    """Drop the database schema for the distribution domain."""
    from distribution.domain import distribution
    from distribution.utils.db import drop_db

    print("Initializing distribution domain...")
    distribution.init()
    print("Dropping distribution database schema...")
    drop_db(distribution)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Distribution database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
