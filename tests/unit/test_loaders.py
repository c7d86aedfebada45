"""
Unit tests for data loaders
"""

import pytest
from unittest.mock import AsyncMock, Mock, call
from sqlalchemy.exc import IntegrityError, OperationalError
from ingestion.loaders.player_loader import BulkLoader, StoreRefresher, count_players
from schemas.player import PlayerRecord
from core.exceptions import RowInsertError, StoreResetError


def _records(count: int):
    return [PlayerRecord(fideid=i, name=f"Player {i}", games=1) for i in range(1, count + 1)]


def _mock_connection(dialect: str = "sqlite"):
    mock_conn = AsyncMock()
    mock_conn.execute = AsyncMock()
    mock_conn.commit = AsyncMock()
    mock_conn.rollback = AsyncMock()
    mock_conn.execution_options = AsyncMock()
    mock_conn.default_isolation_level = "SERIALIZABLE"
    mock_conn.dialect = Mock()
    mock_conn.dialect.name = dialect
    return mock_conn


def _integrity_error():
    return IntegrityError("INSERT INTO player", {}, Exception("UNIQUE constraint failed"))


class TestBulkLoader:
    """Test batched player inserts"""

    @pytest.mark.asyncio
    async def test_load_single_batch(self):
        mock_conn = _mock_connection()
        loader = BulkLoader(mock_conn, batch_size=10)

        result = await loader.load(_records(3))

        assert result.attempted == 3
        assert result.inserted == 3
        assert result.failed == 0
        mock_conn.execute.assert_called_once()
        rows = mock_conn.execute.call_args[0][1]
        assert [row["fideid"] for row in rows] == [1, 2, 3]
        assert len(rows[0]) == 19
        mock_conn.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_load_in_batches(self):
        """Each batch is its own transaction"""
        mock_conn = _mock_connection()
        loader = BulkLoader(mock_conn, batch_size=2)

        result = await loader.load(_records(5))

        assert result.inserted == 5
        assert mock_conn.execute.call_count == 3
        assert mock_conn.commit.call_count == 3
        batch_sizes = [len(c[0][1]) for c in mock_conn.execute.call_args_list]
        assert batch_sizes == [2, 2, 1]

    @pytest.mark.asyncio
    async def test_load_empty(self):
        mock_conn = _mock_connection()
        loader = BulkLoader(mock_conn)

        result = await loader.load([])

        assert result.attempted == 0
        assert result.inserted == 0
        mock_conn.execute.assert_not_called()
        mock_conn.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_batch_is_replayed_row_by_row(self):
        """Good rows still land and the bad row is reported"""
        mock_conn = _mock_connection()
        mock_conn.execute = AsyncMock(
            side_effect=[_integrity_error(), None, _integrity_error(), None]
        )
        loader = BulkLoader(mock_conn, batch_size=10)

        result = await loader.load(_records(3))

        assert result.attempted == 3
        assert result.inserted == 2
        assert result.failed == 1
        error = result.errors[0]
        assert isinstance(error, RowInsertError)
        assert error.fideid == 2
        assert error.context["operation"] == "INSERT"
        assert mock_conn.rollback.call_count == 2
        assert mock_conn.commit.call_count == 2

    @pytest.mark.asyncio
    async def test_overflowing_fideid_is_reported(self):
        """Driver overflow on a huge id is a row error, not a crash"""
        mock_conn = _mock_connection()
        mock_conn.execute = AsyncMock(
            side_effect=[OverflowError("int too big"), OverflowError("int too big")]
        )
        loader = BulkLoader(mock_conn)

        result = await loader.load([PlayerRecord(fideid=2**64 - 1, name="Big", games=1)])

        assert result.inserted == 0
        assert result.errors[0].fideid == 2**64 - 1

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            BulkLoader(_mock_connection(), batch_size=0)


class TestStoreRefresher:
    """Test table reset before a load"""

    @pytest.mark.asyncio
    async def test_refresh_sqlite(self):
        mock_conn = _mock_connection("sqlite")
        mock_conn.execute = AsyncMock(side_effect=[Mock(rowcount=7), None])

        removed = await StoreRefresher(mock_conn).refresh()

        assert removed == 7
        vacuum = mock_conn.execute.call_args_list[1][0][0]
        assert str(vacuum) == "VACUUM"
        assert mock_conn.execution_options.call_args_list == [
            call(isolation_level="AUTOCOMMIT"),
            call(isolation_level="SERIALIZABLE"),
        ]

    @pytest.mark.asyncio
    async def test_refresh_postgresql_vacuums_player_table(self):
        mock_conn = _mock_connection("postgresql")
        mock_conn.default_isolation_level = "READ COMMITTED"
        mock_conn.execute = AsyncMock(side_effect=[Mock(rowcount=0), None])

        await StoreRefresher(mock_conn).refresh()

        vacuum = mock_conn.execute.call_args_list[1][0][0]
        assert str(vacuum) == "VACUUM player"

    @pytest.mark.asyncio
    async def test_delete_failure(self):
        mock_conn = _mock_connection()
        mock_conn.execute = AsyncMock(
            side_effect=OperationalError("DELETE FROM player", {}, Exception("no such table"))
        )

        with pytest.raises(StoreResetError) as exc_info:
            await StoreRefresher(mock_conn).refresh()

        assert exc_info.value.context["operation"] == "DELETE"
        mock_conn.rollback.assert_called_once()
        mock_conn.execution_options.assert_not_called()

    @pytest.mark.asyncio
    async def test_vacuum_failure_restores_isolation_level(self):
        mock_conn = _mock_connection()
        mock_conn.execute = AsyncMock(
            side_effect=[Mock(rowcount=1), OperationalError("VACUUM", {}, Exception("locked"))]
        )

        with pytest.raises(StoreResetError) as exc_info:
            await StoreRefresher(mock_conn).refresh()

        assert exc_info.value.context["operation"] == "VACUUM"
        assert mock_conn.execution_options.call_args_list[-1] == call(isolation_level="SERIALIZABLE")


@pytest.mark.asyncio
async def test_count_players(caplog):
    mock_conn = _mock_connection()
    mock_conn.execute = AsyncMock(return_value=Mock(scalar_one=Mock(return_value=42)))

    with caplog.at_level("INFO"):
        count = await count_players(mock_conn)

    assert count == 42
    assert "Total n. player(s) loaded : 42" in caplog.text
