"""
Core utilities and configuration for the FIDE ratings backend.

Modules:
    config: Application configuration and environment variable management
    database: Async engine and session management
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration

Usage:
    from core.config import settings
    from core.database import build_engine, build_session_maker
    from core.exceptions import FeedReadError, FeedParseError
    from core.logging import setup_logging

Example:
    setup_logging()

    engine = build_engine()
    async with engine.connect() as connection:
        # Run ingestion over one connection
        pass
"""

__all__ = [
    "settings",
    "build_engine",
    "build_session_maker",
    "setup_logging",
    # Exceptions
    "ETLException",
    "ExtractionError",
    "FeedReadError",
    "TransformationError",
    "FeedParseError",
    "LoadError",
    "StoreResetError",
    "RowInsertError",
    "PlayerNotFoundError",
]
