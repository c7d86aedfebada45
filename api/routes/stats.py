"""
Ingestion statistics endpoint
"""
from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from api.dependencies import get_db
from schemas.api import StatsResponse, ETLRunSummary
from models.etl_run import ETLRun, ETLStatus
from models.player import Player
import uuid
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Statistics"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    limit: int = Query(10, ge=1, le=100, description="Number of recent runs to return"),
    db: AsyncSession = Depends(get_db)
):
    """
    Get ingestion statistics.

    Returns:
    - Number of players currently served
    - Run totals, last success/failure and average duration
    - Recent ingestion run history
    """
    request_id = f"req_{uuid.uuid4().hex[:12]}"

    logger.info(f"[{request_id}] GET /stats")

    total_players_result = await db.execute(
        select(func.count()).select_from(Player)
    )
    total_players = total_players_result.scalar()

    total_runs_result = await db.execute(
        select(func.count()).select_from(ETLRun)
    )
    total_runs = total_runs_result.scalar()

    last_success_result = await db.execute(
        select(func.max(ETLRun.completed_at)).where(
            ETLRun.status.in_([ETLStatus.SUCCESS, ETLStatus.PARTIAL])
        )
    )
    last_success = last_success_result.scalar()

    last_failure_result = await db.execute(
        select(func.max(ETLRun.completed_at)).where(ETLRun.status == ETLStatus.FAILED)
    )
    last_failure = last_failure_result.scalar()

    avg_duration_result = await db.execute(
        select(func.avg(ETLRun.duration_seconds)).where(
            ETLRun.status.in_([ETLStatus.SUCCESS, ETLStatus.PARTIAL]),
            ETLRun.duration_seconds.isnot(None)
        )
    )
    avg_duration = avg_duration_result.scalar()

    recent_runs_result = await db.execute(
        select(ETLRun)
        .order_by(ETLRun.started_at.desc())
        .limit(limit)
    )
    recent_runs = [
        ETLRunSummary.model_validate(run)
        for run in recent_runs_result.scalars().all()
    ]

    logger.info(
        f"[{request_id}] Stats: {total_players} players, {total_runs} runs"
    )

    return StatsResponse(
        timestamp=datetime.utcnow(),
        request_id=request_id,
        total_players=total_players or 0,
        total_runs=total_runs or 0,
        recent_runs=recent_runs,
        last_etl_success=last_success,
        last_etl_failure=last_failure,
        avg_etl_duration_seconds=round(avg_duration, 2) if avg_duration else None
    )
