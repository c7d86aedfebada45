"""
Script to refresh the player table from the rating feed
"""

import argparse
import asyncio
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.database import build_engine
from core.exceptions import ETLException
from core.logging import setup_logging
from ingestion.extractors.feed_loader import FeedLoader
from ingestion.runner import ETLRunner
from scripts.init_db import init_database

logger = logging.getLogger(__name__)


async def run_etl(
    source: str,
    database_url: Optional[str] = None,
    batch_size: Optional[int] = None
) -> Dict[str, Any]:
    """Run one full-refresh ingestion over a single store connection"""

    engine = build_engine(database_url)

    try:
        async with engine.connect() as connection:
            runner = ETLRunner(connection, batch_size=batch_size)
            return await runner.run(FeedLoader(source))
    finally:
        await engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Load the federation player list (XML) into the player table"
    )
    parser.add_argument(
        "--source",
        "-s",
        type=str,
        default=settings.FEED_SOURCE,
        help=f"Feed file path or URL, XML or zipped XML (default: {settings.FEED_SOURCE})",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="SQLAlchemy async URL (default: DATABASE_URL setting)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help=f"Rows per insert batch (default: {settings.ETL_BATCH_SIZE})",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create missing tables before loading",
    )
    args = parser.parse_args()

    setup_logging()

    try:
        if args.init_db:
            asyncio.run(init_database(args.database_url))
        asyncio.run(run_etl(args.source, args.database_url, args.batch_size))
    except ETLException as e:
        logger.error(f"ETL failed: {e}", extra={"error_context": e.to_dict()})
        return 1
    except SQLAlchemyError:
        logger.exception("ETL failed: database error")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
