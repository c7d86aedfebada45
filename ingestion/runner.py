# ============================================================================
# File: ingestion/runner.py
# Description: Full-refresh ingestion of the player feed
# ============================================================================
"""
ETL Runner - Orchestrates Load, Decode, Refresh, Insert and Report.

This module runs one ingestion of the player feed:
- Fatal feed errors (unreadable, malformed) stop the run before the store
  is touched
- The player table is emptied and vacuumed before any insert
- Rejected and failing players are reported without aborting the run
- The persisted row count is the reported result
- Each run that reached the store is recorded in etl_runs
"""

import asyncio
from datetime import datetime
from typing import Dict, Any, List, Optional
from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection
import logging

from core.config import settings
from core.exceptions import LoadError, StoreResetError
from ingestion.extractors.feed_loader import FeedLoader
from ingestion.transformers.decoder import decode_feed
from ingestion.transformers.filters import select_admissible
from ingestion.loaders.player_loader import StoreRefresher, BulkLoader, count_players
from models.etl_run import ETLRun, ETLStatus

logger = logging.getLogger(__name__)

# Cap on per-row error entries kept in the run record
MAX_ERROR_DETAILS = 100


class ETLRunner:
    """
    Player feed ingestion orchestrator.

    Responsibilities:
    - Sequence load → decode → refresh → filter/insert → count
    - Keep the store untouched when the feed cannot be decoded
    - Apply best-effort insertion and report what actually persisted
    - Record run metrics

    The connection is owned by the caller, who opens it before the run and
    closes it afterwards on every exit path.
    """

    def __init__(self, connection: AsyncConnection, batch_size: Optional[int] = None):
        self.conn = connection
        self.batch_size = batch_size if batch_size is not None else settings.ETL_BATCH_SIZE
        # Rejected here so a bad size never reaches the store reset
        if self.batch_size < 1:
            raise ValueError("batch_size must be positive")

    async def run(self, loader: FeedLoader) -> Dict[str, Any]:
        """
        Run a full refresh of the player table from one feed.

        Args:
            loader: Feed loader pointing at the feed source

        Returns:
            Dictionary with run statistics:
            - status: "success" or "partial_success"
            - records_extracted: Players decoded from the feed
            - records_skipped: Players rejected by the admissibility filter
            - records_failed: Admissible players whose insert failed
            - records_loaded: Rows in the player table after the run
            - skipped_ids: FIDE IDs of rejected players
            - error_details: Per-row insert errors (if any)

        Raises:
            FeedReadError: If the feed cannot be read
            FeedParseError: If the feed cannot be decoded
            StoreResetError: If the player table cannot be reset
            LoadError: If the final count fails
        """
        started_at = datetime.utcnow()

        # --------------------------------------------------
        # PHASE 1: LOAD FEED
        # --------------------------------------------------
        logger.info(f"Starting ingestion from {loader.source}")
        content = await loader.load()

        # --------------------------------------------------
        # PHASE 2: DECODE
        # --------------------------------------------------
        document = await asyncio.to_thread(decode_feed, content)
        del content
        records_extracted = len(document)
        logger.info(f"Extracted {records_extracted} players")

        # --------------------------------------------------
        # PHASE 3: RESET STORE
        # --------------------------------------------------
        try:
            await StoreRefresher(self.conn).refresh()
        except StoreResetError as e:
            logger.error(
                f"Store reset failed: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            try:
                await self._record_run(
                    source=loader.source,
                    status=ETLStatus.FAILED,
                    started_at=started_at,
                    records_extracted=records_extracted,
                    error_message=e.message,
                    error_details=[e.to_dict()]
                )
            except SQLAlchemyError:
                logger.exception("Could not record the failed ETL run")
            raise

        # --------------------------------------------------
        # PHASE 4: FILTER AND INSERT
        # --------------------------------------------------
        skipped_ids: List[int] = []
        loader_result = await BulkLoader(self.conn, self.batch_size).load(
            select_admissible(document, on_skip=lambda record: skipped_ids.append(record.fideid))
        )

        # --------------------------------------------------
        # PHASE 5: REPORT
        # --------------------------------------------------
        try:
            records_loaded = await count_players(self.conn)
        except SQLAlchemyError as e:
            await self.conn.rollback()
            raise LoadError(
                "Failed to count loaded players",
                context={"operation": "SELECT", "table_name": "player"},
                original_exception=e
            )

        records_failed = loader_result.failed
        error_details = [error.to_dict() for error in loader_result.errors]
        status = ETLStatus.SUCCESS if records_failed == 0 else ETLStatus.PARTIAL

        await self._record_run(
            source=loader.source,
            status=status,
            started_at=started_at,
            records_extracted=records_extracted,
            records_skipped=len(skipped_ids),
            records_failed=records_failed,
            records_loaded=records_loaded,
            error_message=f"{records_failed} players failed to insert" if records_failed else None,
            error_details=error_details[:MAX_ERROR_DETAILS] or None
        )

        result = {
            "status": "success" if records_failed == 0 else "partial_success",
            "records_extracted": records_extracted,
            "records_skipped": len(skipped_ids),
            "records_failed": records_failed,
            "records_loaded": records_loaded,
            "skipped_ids": skipped_ids
        }

        if error_details:
            result["error_details"] = error_details

        logger.info(
            f"ETL run completed: {result['status']} - "
            f"Extracted: {records_extracted}, Skipped: {len(skipped_ids)}, "
            f"Failed: {records_failed}, Loaded: {records_loaded}"
        )

        return result

    async def _record_run(
        self,
        source: str,
        status: ETLStatus,
        started_at: datetime,
        records_extracted: int = 0,
        records_skipped: int = 0,
        records_failed: int = 0,
        records_loaded: int = 0,
        error_message: Optional[str] = None,
        error_details: Optional[List[Dict[str, Any]]] = None
    ):
        """Insert the audit row for this run"""
        completed_at = datetime.utcnow()
        await self.conn.execute(
            insert(ETLRun.__table__).values(
                source=source,
                status=status,
                started_at=started_at,
                completed_at=completed_at,
                duration_seconds=(completed_at - started_at).total_seconds(),
                records_extracted=records_extracted,
                records_skipped=records_skipped,
                records_failed=records_failed,
                records_loaded=records_loaded,
                error_message=error_message,
                error_details=error_details
            )
        )
        await self.conn.commit()
