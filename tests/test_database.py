"""Tests for the database handle and store error classification."""
import asyncio
from pathlib import Path

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError

from app.database import Database, store_error
from app.exceptions import StoreError, StoreUnavailable


@pytest.mark.parametrize("exc", [
    InterfaceError("SELECT 1", {}, Exception("connection closed")),
    DBAPIError("SELECT 1", {}, Exception("server went away"), connection_invalidated=True),
    TimeoutError("timed out"),
    asyncio.TimeoutError(),
])
def test_lost_connections_and_timeouts_are_unavailable(exc) -> None:
    error = store_error(exc)
    assert isinstance(error, StoreUnavailable)
    assert error.message.startswith("Database unavailable:")


@pytest.mark.parametrize("exc", [
    OperationalError("SELECT 1", {}, Exception("no such table: reviewed_questions")),
    IntegrityError("INSERT", {}, Exception("disk full")),
])
def test_other_database_errors_are_store_errors(exc) -> None:
    error = store_error(exc)
    assert isinstance(error, StoreError)
    assert not isinstance(error, StoreUnavailable)
    assert error.message.startswith("Database error:")
    assert str(exc.orig) in error.message


async def test_connect_to_unreachable_database_raises(tmp_path: Path) -> None:
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'test.db'}")
    try:
        with pytest.raises(StoreUnavailable):
            await database.connect()
    finally:
        await database.dispose()


def test_empty_url_is_rejected() -> None:
    with pytest.raises(StoreUnavailable):
        Database("")
