"""
FastAPI dependencies shared by the routers
"""

from typing import AsyncGenerator
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from core.database import async_session_maker
from core.exceptions import PlayerNotFoundError
from models.player import MAX_STORED_FIDEID
from schemas.player import PlayerRecord
from api.lookup import fetch_player


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request, closed when the response is sent"""
    async with async_session_maker() as session:
        yield session


def parse_player_id(player_id: str) -> int:
    """
    Parse a path identifier into a FIDE ID.

    Malformed identifiers cannot match any player, so they are reported as
    not found rather than as a validation error.
    """
    if not (player_id.isascii() and player_id.isdigit()):
        raise PlayerNotFoundError(player_id, context={"reason": "malformed id"})

    fideid = int(player_id)
    if fideid > MAX_STORED_FIDEID:
        raise PlayerNotFoundError(player_id, context={"reason": "id out of range"})

    return fideid


async def get_player(
    player_id: str,
    db: AsyncSession = Depends(get_db)
) -> PlayerRecord:
    """Resolve the {player_id} path segment to a stored player"""
    return await fetch_player(db, parse_player_id(player_id))
