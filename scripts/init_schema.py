"""CLI entry point for creating the shop tables.

Usage:
    python -m scripts.init_schema --db-url sqlite:///shop.db
    python -m scripts.init_schema --db-url "dbname=shopdb user=admin password=..."
"""

import argparse
import logging
import os
import sys

from shopdb import DatabaseConnectionError, StatementError, create_accessor
from shopdb.config import FALLBACK_DSN_VAR
from shopdb.logging_config import LOG_FORMAT
from shopdb.shop import ensure_shop_schema

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the orders/products/order_items tables")
    parser.add_argument("--db-url", help=f"Connection string (default: ${FALLBACK_DSN_VAR})")
    args = parser.parse_args()

    db_url = args.db_url or os.environ.get(FALLBACK_DSN_VAR)
    if not db_url:
        logger.error("No connection string. Pass --db-url or set %s.", FALLBACK_DSN_VAR)
        sys.exit(1)

    try:
        with create_accessor(db_url) as db:
            ensure_shop_schema(db)
    except (DatabaseConnectionError, StatementError):
        sys.exit(1)
    logger.info("Done.")


if __name__ == "__main__":
    main()
