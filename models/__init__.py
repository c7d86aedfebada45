"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class and shared enums (ETLStatus)
    player: The served player table, fully replaced on every feed refresh
    etl_run: Ingestion run tracking and metrics

Usage:
    from models.player import Player
    from models.etl_run import ETLRun
    from models.base import Base, ETLStatus

Example:
    # Look up one player
    result = await session.execute(
        select(Player).where(Player.fideid == 1503014)
    )
    player = result.scalar_one_or_none()

Relationships:
    None. Player rows carry no reference to the run that loaded them;
    the table only ever holds the latest snapshot.
"""

__all__ = [
    "Base",
    "ETLStatus",
    "Player",
    "ETLRun",
]
