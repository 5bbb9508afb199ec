#!/usr/bin/env python3
"""
Ingest one or more vendor catalogs from the command line, without the API.

Usage:
    python scripts/ingest_catalog.py 12 34
    python scripts/ingest_catalog.py --base-url http://localhost:9000/productlist 12
"""
import argparse
import logging
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.adapters.vendor_client import VendorCatalogClient
from app.config import settings
from app.db import init_db
from app.services.sync_scheduler import run_sync
from app.utils.logging import configure_logging

log = logging.getLogger("ingest_catalog")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Fetch vendor catalogs and store them locally")
    parser.add_argument("remote_ids", nargs="+", help="vendor catalog ids to ingest, in order")
    parser.add_argument("--base-url", default=settings.VENDOR_BASE_URL, help="vendor product-list endpoint")
    parser.add_argument("--no-lock", action="store_true", help="skip the ingestion file lock")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    if args.no_lock:
        settings.INGEST_LOCK_ENABLED = False
    init_db()

    with VendorCatalogClient(base_url=args.base_url) as client:
        failed = run_sync(client, args.remote_ids)

    if failed:
        log.error("Failed ids: %s", ", ".join(failed))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
