"""
Unit tests for the transaction wrapper and store error mapping
"""

import pytest
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    ExecutionTimeout,
    NetworkTimeout,
    OperationFailure,
    ServerSelectionTimeoutError,
)

from zentype.core.exceptions import (
    StorageError,
    StorageUnavailableError,
    TransactionConflictError,
    TransactionOrderError,
)
from zentype.database import MongoDatabase, create_indexes


class TestTransaction:
    """Commit, abort and the reads-before-writes rule."""

    @pytest.mark.asyncio
    async def test_commit(self, database, test_db, mongo_client):
        async with database.transaction() as tx:
            await tx.insert_one(test_db["things"], {"_id": "a"})
            matched = await tx.update_one(test_db["things"], {"_id": "a"}, {"$set": {"n": 1}})

        assert matched == 1
        assert await test_db["things"].find_one({"_id": "a"}) == {"_id": "a", "n": 1}
        assert mongo_client.committed_transactions == 1

    @pytest.mark.asyncio
    async def test_read_after_write_fails_and_aborts(self, database, test_db, mongo_client):
        with pytest.raises(TransactionOrderError):
            async with database.transaction() as tx:
                await tx.find_one(test_db["things"], {"_id": "a"})
                await tx.insert_one(test_db["things"], {"_id": "a"})
                await tx.find_one(test_db["things"], {"_id": "a"})

        assert await test_db["things"].count_documents({}) == 0
        assert mongo_client.aborted_transactions == 1

    @pytest.mark.asyncio
    async def test_upsert_reports_no_match(self, database, test_db):
        async with database.transaction() as tx:
            matched = await tx.update_one(test_db["things"], {"_id": "b"}, {"$set": {"n": 2}}, upsert=True)

        assert matched == 0
        assert await test_db["things"].count_documents({}) == 1

    @pytest.mark.asyncio
    async def test_not_connected(self):
        database = MongoDatabase("mongodb://fake")

        assert await database.ping() is False
        with pytest.raises(RuntimeError):
            async with database.transaction():
                pass


class TestErrorMapping:
    """pymongo errors become StorageError subclasses."""

    @pytest.mark.parametrize(
        "error,expected",
        [
            (ConnectionFailure("down"), StorageUnavailableError),
            (ServerSelectionTimeoutError("no servers available"), StorageUnavailableError),
            (NetworkTimeout("timed out after timeoutMS"), TransactionConflictError),
            (
                AutoReconnect("connection reset", errors={"errorLabels": ["TransientTransactionError"]}),
                TransactionConflictError,
            ),
            (ExecutionTimeout("too slow"), TransactionConflictError),
            (OperationFailure("WriteConflict", code=112), TransactionConflictError),
            (
                OperationFailure("aborted", code=251, details={"errorLabels": ["TransientTransactionError"]}),
                TransactionConflictError,
            ),
            (OperationFailure("bad update", code=9), StorageError),
        ],
    )
    @pytest.mark.asyncio
    async def test_mapping(self, database, test_db, mongo_client, error, expected):
        mongo_client.fail_on("things", "insert_one", error)

        with pytest.raises(expected) as exc_info:
            async with database.transaction() as tx:
                await tx.insert_one(test_db["things"], {"_id": "a"})

        assert type(exc_info.value) is expected
        assert exc_info.value.__cause__ is error
        assert await test_db["things"].count_documents({}) == 0


class TestCreateIndexes:

    @pytest.mark.asyncio
    async def test_creates_every_collection_index(self, test_db):
        await create_indexes(test_db)

        assert {"profiles", "test_results", "leaderboard", "leaderboard_weekly",
                "leaderboard_monthly", "test_contents"} <= set(test_db.collections)
