"""
Integration tests for complete ETL pipeline
"""

import logging
import pytest
from sqlalchemy import select
from ingestion.extractors.feed_loader import FeedLoader
from ingestion.runner import ETLRunner
from models.player import Player
from models.etl_run import ETLRun, ETLStatus


async def _stored_players(connection):
    result = await connection.execute(select(Player.__table__).order_by(Player.fideid))
    rows = [dict(row._mapping) for row in result]
    await connection.commit()
    return rows


@pytest.mark.asyncio
async def test_full_etl_pipeline_integration(db_connection, feed_file, caplog):
    """
    Integration test: Load → Decode → Refresh → Insert → Count
    """
    runner = ETLRunner(db_connection)

    with caplog.at_level(logging.INFO):
        result = await runner.run(FeedLoader(str(feed_file)))

    # Verify result
    assert result["status"] == "success"
    assert result["records_extracted"] == 3
    assert result["records_skipped"] == 2
    assert result["records_failed"] == 0
    assert result["records_loaded"] == 1
    assert result["skipped_ids"] == [2, 3]

    # Only the admissible player is stored
    rows = await _stored_players(db_connection)
    assert len(rows) == 1
    assert rows[0]["fideid"] == 1
    assert rows[0]["name"] == "A"
    assert rows[0]["country"] == "NOR"
    assert rows[0]["rating"] == 2100
    assert rows[0]["k"] == 20
    assert rows[0]["title"] == ""

    # Skip notices and the summary line
    assert "Skip player FIDE ID 2 by having either name or games field empty" in caplog.text
    assert "Skip player FIDE ID 3 by having either name or games field empty" in caplog.text
    assert "Total n. player(s) loaded : 1" in caplog.text


@pytest.mark.asyncio
async def test_full_player_round_trip(db_connection, tmp_path, make_feed, full_player):
    """Every feed field is persisted unchanged"""
    path = tmp_path / "feed.xml"
    path.write_bytes(make_feed([full_player]))

    await ETLRunner(db_connection).run(FeedLoader(str(path)))

    rows = await _stored_players(db_connection)
    assert rows == [full_player]


@pytest.mark.asyncio
async def test_run_is_idempotent(db_connection, feed_file):
    """Running the same feed twice yields the same table"""
    runner = ETLRunner(db_connection)

    first = await runner.run(FeedLoader(str(feed_file)))
    rows_first = await _stored_players(db_connection)

    second = await runner.run(FeedLoader(str(feed_file)))
    rows_second = await _stored_players(db_connection)

    assert first["records_loaded"] == second["records_loaded"] == 1
    assert rows_first == rows_second


@pytest.mark.asyncio
async def test_new_feed_replaces_previous_load(db_connection, tmp_path, make_feed):
    """No row of an earlier feed survives a refresh"""
    path = tmp_path / "feed.xml"
    path.write_bytes(make_feed([
        {"fideid": 10, "name": "Old One", "games": 4},
        {"fideid": 11, "name": "Old Two", "games": 2},
    ]))
    runner = ETLRunner(db_connection)
    await runner.run(FeedLoader(str(path)))

    path.write_bytes(make_feed([{"fideid": 12, "name": "New", "games": 1}]))
    result = await runner.run(FeedLoader(str(path)))

    rows = await _stored_players(db_connection)
    assert [row["fideid"] for row in rows] == [12]
    assert result["records_loaded"] == 1


@pytest.mark.asyncio
async def test_all_admissible_players_are_stored(db_connection, tmp_path, make_feed):
    """Stored rows are exactly the admissible players, across several batches"""
    players = [
        {"fideid": i, "name": f"Player {i}" if i % 3 else "", "games": i % 4}
        for i in range(1, 51)
    ]
    path = tmp_path / "feed.xml"
    path.write_bytes(make_feed(players))

    result = await ETLRunner(db_connection, batch_size=7).run(FeedLoader(str(path)))

    expected = [p["fideid"] for p in players if p["name"] and p["games"] > 0]
    rows = await _stored_players(db_connection)
    assert [row["fideid"] for row in rows] == expected
    assert all(row["name"] != "" and row["games"] > 0 for row in rows)
    assert result["records_loaded"] == len(expected)
    assert result["records_skipped"] == 50 - len(expected)


@pytest.mark.asyncio
async def test_duplicate_fideid_is_partial_success(db_connection, tmp_path, make_feed):
    """A duplicate row fails alone; the count reports what persisted"""
    path = tmp_path / "feed.xml"
    path.write_bytes(make_feed([
        {"fideid": 1, "name": "First", "games": 3},
        {"fideid": 2, "name": "Second", "games": 3},
        {"fideid": 1, "name": "First Again", "games": 5},
        {"fideid": 3, "name": "Third", "games": 3},
    ]))

    result = await ETLRunner(db_connection).run(FeedLoader(str(path)))

    rows = await _stored_players(db_connection)
    assert [row["fideid"] for row in rows] == [1, 2, 3]
    assert rows[0]["name"] == "First"
    assert result["status"] == "partial_success"
    assert result["records_failed"] == 1
    assert result["records_loaded"] == len(rows)
    assert result["error_details"][0]["context"]["fideid"] == 1


@pytest.mark.asyncio
async def test_etl_run_recorded(db_connection, db_session, feed_file):
    """Each completed run leaves an audit row"""
    await ETLRunner(db_connection).run(FeedLoader(str(feed_file)))

    runs = (await db_session.execute(select(ETLRun))).scalars().all()
    assert len(runs) == 1

    run = runs[0]
    assert run.status == ETLStatus.SUCCESS
    assert run.source == str(feed_file)
    assert run.records_extracted == 3
    assert run.records_skipped == 2
    assert run.records_failed == 0
    assert run.records_loaded == 1
    assert run.completed_at is not None
    assert run.duration_seconds >= 0


@pytest.mark.asyncio
async def test_empty_feed_empties_store(db_connection, tmp_path, make_feed, feed_file):
    runner = ETLRunner(db_connection)
    await runner.run(FeedLoader(str(feed_file)))

    path = tmp_path / "empty.xml"
    path.write_bytes(make_feed([]))
    result = await runner.run(FeedLoader(str(path)))

    assert result["records_extracted"] == 0
    assert result["records_loaded"] == 0
    assert await _stored_players(db_connection) == []
