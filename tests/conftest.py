"""
Pytest configuration and fixtures
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from models.base import Base
from typing import AsyncGenerator, Dict, Any, Iterable


def build_feed(players: Iterable[Dict[str, Any]], root: str = "playerslist") -> bytes:
    """Render player dicts as a feed document; keys become child tags"""
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', f"<{root}>"]
    for player in players:
        lines.append("<player>")
        for tag, value in player.items():
            lines.append(f"<{tag}>{value}</{tag}>")
        lines.append("</player>")
    lines.append(f"</{root}>")
    return "\n".join(lines).encode("utf-8")


@pytest.fixture
def make_feed():
    """Factory for feed documents"""
    return build_feed


@pytest.fixture
def full_player() -> Dict[str, Any]:
    """One admissible player with every feed field set"""
    return {
        "fideid": 1503014,
        "name": "Carlsen, Magnus",
        "country": "NOR",
        "sex": "M",
        "title": "GM",
        "w_title": "",
        "o_title": "",
        "foa_title": "",
        "rating": 2830,
        "games": 9,
        "k": 10,
        "rapid_rating": 2823,
        "rapid_games": 12,
        "rapid_k": 20,
        "blitz_rating": 2886,
        "blitz_games": 21,
        "blitz_k": 20,
        "birthday": 1990,
        "flag": "",
    }


@pytest.fixture
def mock_feed_players():
    """Three players: one admissible, one without name, one without games"""
    return [
        {"fideid": 1, "name": "A", "country": "NOR", "games": 10, "rating": 2100, "k": 20},
        {"fideid": 2, "name": "", "country": "SWE", "games": 5, "rating": 1900, "k": 20},
        {"fideid": 3, "name": "B", "country": "DEN", "games": 0, "rating": 1800, "k": 40},
    ]


@pytest.fixture
def feed_file(tmp_path, make_feed, mock_feed_players):
    """Feed file on disk holding mock_feed_players"""
    path = tmp_path / "players_list_xml_foa.xml"
    path.write_bytes(make_feed(mock_feed_players))
    return path


@pytest.fixture
def database_url(tmp_path) -> str:
    """SQLite database file private to the test"""
    return f"sqlite+aiosqlite:///{tmp_path / 'fide_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def test_engine(database_url):
    """Create test database engine"""
    engine = create_async_engine(
        database_url,
        echo=False,
        poolclass=NullPool,  # Disable connection pooling for tests
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_connection(test_engine) -> AsyncGenerator[AsyncConnection, None]:
    """Single connection for one ingestion run"""
    async with test_engine.connect() as connection:
        yield connection


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()
