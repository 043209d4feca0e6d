import psycopg
import pytest
from psycopg import errors

from viah.db import helpers
from viah.db.helpers import DatabaseError, InvalidInputError, fetch_all, fetch_one


class _FailingCursor:
    def __init__(self, error: Exception):
        self._error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def execute(self, query, params):
        raise self._error


class _FailingConnection:
    def __init__(self, error: Exception):
        self._error = error

    def cursor(self):
        return _FailingCursor(self._error)

    async def execute(self, query, params):
        raise self._error


@pytest.mark.asyncio
async def test_malformed_uuid_becomes_invalid_input():
    bad_uuid = errors.InvalidTextRepresentation('invalid input syntax for type uuid: "abc"')

    with pytest.raises(InvalidInputError) as exc_info:
        await fetch_one("SELECT 1 WHERE id = %s", ("abc",), connection=_FailingConnection(bad_uuid))

    assert exc_info.value.operation == "fetch_one"
    assert exc_info.value.recoverable is False


@pytest.mark.asyncio
async def test_other_driver_errors_stay_database_errors():
    lost = psycopg.OperationalError("server closed the connection unexpectedly")

    with pytest.raises(DatabaseError) as exc_info:
        await fetch_all("SELECT 1", connection=_FailingConnection(lost))

    assert not isinstance(exc_info.value, InvalidInputError)
    assert exc_info.value.operation == "fetch_all"


@pytest.mark.asyncio
async def test_execute_maps_data_errors(monkeypatch):
    overflow = errors.NumericValueOutOfRange("value out of range")

    async def fake_connection():
        return _PooledConnection(_FailingConnection(overflow))

    monkeypatch.setattr(helpers, "get_db_connection", fake_connection)

    with pytest.raises(InvalidInputError):
        await helpers.execute_query("UPDATE expenses SET amount = %s", (10**20,))


class _PooledConnection:
    def __init__(self, connection):
        self._connection = connection

    async def __aenter__(self):
        return self._connection

    async def __aexit__(self, *exc_info):
        return False
