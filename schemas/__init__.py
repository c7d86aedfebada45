"""
Pydantic schemas for data validation and serialization.

Schemas:
    player: PlayerRecord (one decoded feed entry) and PlayerFeedDocument
    api: API response models (health, stats, errors)

Features:
    - Type coercion of feed text into integers
    - Empty-string / zero defaults for absent feed fields
    - Range checks for identifiers, K-factors and birth years
    - OpenAPI schema generation for FastAPI

Usage:
    from schemas.player import PlayerRecord, PlayerFeedDocument
    from schemas.api import HealthCheckResponse, StatsResponse

Example:
    record = PlayerRecord(fideid="1503014", name="Carlsen, Magnus", games="")

    assert record.fideid == 1503014
    assert record.games == 0
    assert record.country == ""
"""

__all__ = [
    "PlayerRecord",
    "PlayerFeedDocument",
    "ETLRunSummary",
    "HealthCheckResponse",
    "StatsResponse",
    "ErrorResponse",
]
