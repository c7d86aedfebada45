"""
Single-player lookup against the player table
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from models.player import Player, PLAYER_DATA_COLUMNS
from schemas.player import PlayerRecord
from core.exceptions import PlayerNotFoundError

# The 18 non-key columns, in table order
_lookup_columns = [Player.__table__.c[name] for name in PLAYER_DATA_COLUMNS]


async def fetch_player(db: AsyncSession, fideid: int) -> PlayerRecord:
    """
    Fetch one player by primary key.

    Raises:
        PlayerNotFoundError: No row has this FIDE ID
        SQLAlchemyError: Connectivity or query failure (propagated as is)
    """
    result = await db.execute(
        select(*_lookup_columns).where(Player.fideid == fideid)
    )
    row = result.one_or_none()

    if row is None:
        raise PlayerNotFoundError(fideid)

    return PlayerRecord(fideid=fideid, **row._mapping)
