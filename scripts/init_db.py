import argparse
import asyncio
import logging
from typing import Optional

from core.database import build_engine
from core.logging import setup_logging
from models.base import Base
# Import all models to ensure they are registered
from models.player import Player
from models.etl_run import ETLRun

logger = logging.getLogger(__name__)


async def init_database(database_url: Optional[str] = None):
    logger.info("Connecting to database...")
    engine = build_engine(database_url)

    try:
        async with engine.begin() as conn:
            logger.info("Creating tables...")
            # Create all tables defined in models
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Tables created successfully.")
    finally:
        await engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the player and etl_runs tables")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="SQLAlchemy async URL (default: DATABASE_URL setting)",
    )
    args = parser.parse_args()

    setup_logging()
    asyncio.run(init_database(args.database_url))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
