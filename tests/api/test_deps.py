"""
Tests for MongoDB connection setup in the API dependencies.
"""

import pytest
from fastapi import HTTPException
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ConnectionFailure, OperationFailure

from movie_api.api import deps
from tests.conftest import run


class _UnreachableClient:
    """Stands in for a Motor client whose server never answers."""

    def __init__(self, *args, **kwargs):
        self.closed = False
        self.admin = self

    async def command(self, name):
        raise ConnectionFailure("No servers found")

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def reset_connections(monkeypatch):
    monkeypatch.setattr(deps, "mongo_client", None)
    monkeypatch.setattr(deps, "db_instance", None)


class TestInitializeConnections:

    def test_connects_and_builds_indexes(self, monkeypatch):
        monkeypatch.setattr(deps, "AsyncIOMotorClient", lambda *args, **kwargs: AsyncMongoMockClient())
        run(deps.initialize_connections())

        assert deps.db_instance is not None
        indexes = run(deps.db_instance["users"].index_information())
        assert "Username_unique" in indexes

    def test_index_failure_keeps_database_available(self, monkeypatch):
        """Duplicate Usernames already stored must not take every route offline."""
        async def failing_indexes(db):
            raise OperationFailure("E11000 duplicate key error collection: users index: Username_unique")

        monkeypatch.setattr(deps, "AsyncIOMotorClient", lambda *args, **kwargs: AsyncMongoMockClient())
        monkeypatch.setattr(deps, "ensure_indexes", failing_indexes)
        run(deps.initialize_connections())

        assert deps.mongo_client is not None
        assert deps.db_instance is not None
        assert run(deps.get_db().__anext__()) is deps.db_instance

    def test_unreachable_server_closes_client(self, monkeypatch):
        created = []

        def factory(*args, **kwargs):
            created.append(_UnreachableClient())
            return created[-1]

        monkeypatch.setattr(deps, "AsyncIOMotorClient", factory)
        run(deps.initialize_connections())

        assert created[0].closed
        assert deps.mongo_client is None
        assert deps.db_instance is None
        with pytest.raises(HTTPException) as excinfo:
            run(deps.get_db().__anext__())
        assert excinfo.value.status_code == 503
