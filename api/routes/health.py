"""
Health check endpoint with database and ingestion status
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, text
from sqlalchemy.exc import SQLAlchemyError
from api.dependencies import get_db
from schemas.api import HealthCheckResponse, ETLRunSummary
from models.player import Player
from models.etl_run import ETLRun
from datetime import datetime
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
    - Database connectivity status
    - Number of players currently served
    - Most recent ingestion run
    """

    # Check database connectivity
    db_connected = False

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {str(e)}")

    total_players = None
    last_run = None

    if db_connected:
        try:
            count_result = await db.execute(select(func.count()).select_from(Player))
            total_players = count_result.scalar()
        except SQLAlchemyError as e:
            logger.error(f"Failed to count players: {str(e)}")
            await db.rollback()

        try:
            run_result = await db.execute(
                select(ETLRun).order_by(ETLRun.started_at.desc()).limit(1)
            )
            run = run_result.scalar_one_or_none()
            if run is not None:
                last_run = ETLRunSummary.model_validate(run)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch last ETL run: {str(e)}")
            await db.rollback()

    return HealthCheckResponse(
        timestamp=datetime.utcnow(),
        database_connected=db_connected,
        total_players=total_players,
        last_run=last_run
    )
