import argparse
import sys

from .catalog_data import CATALOG_CODES
from .database import SessionLocal, init_db
from .providers.sql import seed_catalog
from .zones import check_zone_tables
from .errors import ZoneTableError


def seed_codes():
    init_db()
    db = SessionLocal()
    try:
        added = seed_catalog(db, CATALOG_CODES)
        if added:
            print(f"Added {added} dental codes")
        else:
            print("All dental codes already present. No changes made.")
    finally:
        db.close()


def check_tables():
    try:
        check_zone_tables()
    except ZoneTableError as e:
        print(f"ERROR: {e.message}")
        sys.exit(1)
    print("Zone tables are consistent")


def main():
    parser = argparse.ArgumentParser(description="Dental chart engine CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("seed-codes", help="Add the dental codes the engine uses to the catalog")
    subparsers.add_parser("check-zones", help="Verify the surface/zone tables")

    args = parser.parse_args()

    if args.command == "seed-codes":
        seed_codes()
    elif args.command == "check-zones":
        check_tables()
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
