"""
Player lookup endpoint
"""

from fastapi import APIRouter, Depends, Request
from api.dependencies import get_player
from schemas.api import ErrorResponse
from schemas.player import PlayerRecord
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Players"])


@router.get(
    "/players/{player_id}",
    response_model=PlayerRecord,
    responses={404: {"model": ErrorResponse, "description": "Unknown or malformed FIDE ID"}}
)
async def read_player(
    request: Request,
    player: PlayerRecord = Depends(get_player)
):
    """
    Return one player by FIDE ID.

    The player is resolved by the get_player dependency; unknown and
    malformed identifiers both answer 404.
    """
    logger.info(f"[{request.state.request_id}] GET /players/{player.fideid}")
    return player
