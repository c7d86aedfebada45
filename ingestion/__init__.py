"""
ETL pipeline components for the player rating feed.

Modules:
    runner: Orchestrator that sequences one full-refresh ingestion

Subpackages:
    extractors: Feed loader (file, URL, zip archive)
    transformers: XML decoder and admissibility filter
    loaders: Store refresher, bulk loader and row counter

Architecture:
    Each run replaces the whole player table:

    1. Load - Read the raw feed into memory
    2. Decode - Parse <playerslist> into typed PlayerRecord values
    3. Refresh - DELETE all players, then VACUUM
    4. Insert - Filter admissible players and insert them in feed order
    5. Report - Count the persisted rows

    Load and decode failures abort before the store is touched. Rejected
    players and failing rows are reported and the run continues.

Usage:
    from ingestion.extractors.feed_loader import FeedLoader
    from ingestion.runner import ETLRunner

Example:
    async with engine.connect() as connection:
        runner = ETLRunner(connection)
        result = await runner.run(FeedLoader("players_list_xml_foa.xml"))

    print(f"Loaded {result['records_loaded']} players")

Error Handling:
    All components raise exceptions from core.exceptions with structured
    context (FeedReadError, FeedParseError, StoreResetError, RowInsertError).
"""

__all__ = [
    "ETLRunner",
    "FeedLoader",
    "decode_feed",
    "is_admissible",
    "select_admissible",
    "StoreRefresher",
    "BulkLoader",
    "count_players",
]
