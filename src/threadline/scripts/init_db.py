"""Create the Threadline tables in the configured database."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from threadline.core.errors import StoreUnavailableError
from threadline.db.session import Database

logger = logging.getLogger(__name__)


async def init_db(url: str | None = None, *, drop: bool = False) -> None:
    """Create all tables, optionally dropping existing ones first."""
    database = Database(url)
    try:
        if drop:
            await database.drop_tables()
        await database.create_tables()
    finally:
        await database.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", help="Database URL (defaults to DATABASE_URL)")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        asyncio.run(init_db(args.url, drop=args.drop))
    except StoreUnavailableError as exc:
        logger.error("%s", exc)
        return 1
    logger.info("Database initialized.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
