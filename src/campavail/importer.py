"""Load a JSON export of the document store into the database.

Usage: python -m campavail.importer export.json [--database-url URL]
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from campavail.normalize import import_documents, load_export
from campavail.services import build_services, close_services

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Import camps, bookings and blocked dates from a JSON export"
    )
    parser.add_argument("export", type=Path, help="JSON file keyed by collection name")
    parser.add_argument("--database-url", default=None,
                        help="Target database (defaults to DATABASE_URL)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    services = build_services(args.database_url)
    try:
        count = import_documents(services.store, load_export(args.export))
    finally:
        close_services(services)
    print(f"Imported {count} records from {args.export}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
