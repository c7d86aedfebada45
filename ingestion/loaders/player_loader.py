"""
Write decoded players into the store: reset, bulk insert, count
"""

from dataclasses import dataclass, field
from typing import Iterable, List
from sqlalchemy import delete, func, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection
from models.player import Player
from schemas.player import PlayerRecord
from core.exceptions import StoreResetError, RowInsertError
import logging

logger = logging.getLogger(__name__)

player_table = Player.__table__

# Errors a single row can raise without breaking the connection
ROW_ERRORS = (SQLAlchemyError, OverflowError)


class StoreRefresher:
    """
    Empty the player table and reclaim its space before a new load.

    Ensures:
    - No row of the previous load survives
    - Freed pages are compacted (VACUUM)
    - Any failure stops the run with StoreResetError
    """

    def __init__(self, connection: AsyncConnection):
        self.conn = connection

    async def refresh(self) -> int:
        """
        Delete all players, then vacuum.

        Returns:
            Number of rows removed
        """
        try:
            result = await self.conn.execute(delete(player_table))
            await self.conn.commit()
        except SQLAlchemyError as e:
            await self.conn.rollback()
            raise StoreResetError(
                "Failed to delete existing players",
                context={"operation": "DELETE", "table_name": player_table.name},
                original_exception=e
            )

        removed = result.rowcount
        logger.info(f"Deleted {removed} players from {player_table.name}")

        await self._reclaim()
        return removed

    async def _reclaim(self):
        # VACUUM refuses to run inside a transaction block
        statement = self._vacuum_statement()
        isolation_level = self.conn.default_isolation_level

        try:
            await self.conn.execution_options(isolation_level="AUTOCOMMIT")
            await self.conn.execute(text(statement))
            await self.conn.commit()
        except SQLAlchemyError as e:
            await self.conn.rollback()
            raise StoreResetError(
                "Failed to reclaim player table space",
                context={"operation": "VACUUM", "table_name": player_table.name},
                original_exception=e
            )
        finally:
            await self.conn.execution_options(isolation_level=isolation_level)

        logger.info(f"Reclaimed storage with {statement}")

    def _vacuum_statement(self) -> str:
        if self.conn.dialect.name == "postgresql":
            return f"VACUUM {player_table.name}"
        return "VACUUM"


@dataclass
class LoadResult:
    """Outcome of one bulk load"""
    attempted: int = 0
    inserted: int = 0
    errors: List[RowInsertError] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.errors)


class BulkLoader:
    """
    Insert players with one reusable INSERT over all 19 columns.

    Rows go out in batches, one transaction per batch. A failing batch is
    rolled back and replayed row by row so that every good row still lands
    and every bad row is reported with its FIDE ID (best-effort policy).
    """

    def __init__(self, connection: AsyncConnection, batch_size: int = 500):
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.conn = connection
        self.batch_size = batch_size
        self.statement = insert(player_table)

    async def load(self, records: Iterable[PlayerRecord]) -> LoadResult:
        """
        Insert records in the order given.

        Args:
            records: Admissible players, in feed order

        Returns:
            LoadResult with attempted/inserted counts and row errors
        """
        result = LoadResult()
        batch: List[PlayerRecord] = []

        for record in records:
            batch.append(record)
            if len(batch) >= self.batch_size:
                await self._flush(batch, result)
                batch = []

        if batch:
            await self._flush(batch, result)

        logger.info(
            f"Inserted {result.inserted} of {result.attempted} players "
            f"({result.failed} failed)"
        )
        return result

    async def _flush(self, batch: List[PlayerRecord], result: LoadResult):
        result.attempted += len(batch)
        rows = [record.model_dump() for record in batch]

        try:
            await self.conn.execute(self.statement, rows)
            await self.conn.commit()
            result.inserted += len(rows)
            return
        except ROW_ERRORS as e:
            await self.conn.rollback()
            logger.warning(
                f"Batch of {len(rows)} players failed ({type(e).__name__}), "
                f"retrying row by row"
            )

        for record, row in zip(batch, rows):
            try:
                await self.conn.execute(self.statement, row)
                await self.conn.commit()
                result.inserted += 1
            except ROW_ERRORS as e:
                await self.conn.rollback()
                error = RowInsertError(
                    record.fideid,
                    context={"operation": "INSERT", "table_name": player_table.name},
                    original_exception=e
                )
                result.errors.append(error)
                logger.error(
                    f"Failed to insert player FIDE ID {record.fideid}: {e}",
                    extra={"error_context": error.to_dict()}
                )


async def count_players(connection: AsyncConnection) -> int:
    """Count persisted players and report the run summary line"""
    result = await connection.execute(
        select(func.count()).select_from(player_table)
    )
    count = result.scalar_one()
    await connection.commit()

    logger.info(f"Total n. player(s) loaded : {count}")
    return count
