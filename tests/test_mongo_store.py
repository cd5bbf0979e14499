"""Tests for the motor-backed store against mocked collections and sessions."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.domains.items.models import ItemCreate
from app.domains.items.service import ItemService
from app.shared.errors import DuplicateName, StoreError, TransactionFailure
from app.shared.mongo_store import MongoRepository, MongoStore
from app.shared.transaction import TransactionCoordinator


def make_collection(name="items"):
    collection = MagicMock()
    collection.name = name
    return collection


def cursor_returning(documents):
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=documents)
    return cursor


@pytest.mark.asyncio
async def test_insert_stamps_and_passes_session():
    collection = make_collection()
    oid = ObjectId()
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=oid))
    session = object()

    doc = await MongoRepository(collection).insert({"name": "Latte"}, session=session)

    assert doc["_id"] == oid
    assert doc["created_at"] == doc["updated_at"]
    args, kwargs = collection.insert_one.call_args
    assert args[0]["name"] == "Latte"
    assert kwargs["session"] is session


@pytest.mark.asyncio
async def test_duplicate_key_becomes_duplicate_name():
    collection = make_collection("categories")
    collection.insert_one = AsyncMock(side_effect=DuplicateKeyError("E11000"))

    repository = MongoRepository(collection, duplicate_message="Category already exists")
    with pytest.raises(DuplicateName, match="Category already exists"):
        await repository.insert({"name": "Beverages"})


@pytest.mark.asyncio
async def test_driver_errors_become_store_error():
    collection = make_collection()
    collection.find_one = AsyncMock(side_effect=PyMongoError("server selection timeout"))

    with pytest.raises(StoreError):
        await MongoRepository(collection).find_by_name("Latte")


@pytest.mark.asyncio
async def test_malformed_id_matches_nothing():
    collection = make_collection()
    collection.find_one = AsyncMock()

    assert await MongoRepository(collection).find_by_id("Latte") is None
    collection.find_one.assert_not_called()


@pytest.mark.asyncio
async def test_push_is_atomic_update():
    collection = make_collection("subcategories")
    collection.update_one = AsyncMock(return_value=MagicMock(matched_count=1))
    parent, child = ObjectId(), ObjectId()

    assert await MongoRepository(collection).push(str(parent), "items", child) is True

    query, update = collection.update_one.call_args.args
    assert query == {"_id": parent}
    assert update["$push"] == {"items": child}
    assert "updated_at" in update["$set"]


@pytest.mark.asyncio
async def test_search_escapes_term():
    collection = make_collection()
    collection.find = MagicMock(return_value=cursor_returning([]))

    await MongoRepository(collection).search_name("latte (large)")

    query = collection.find.call_args.args[0]
    assert query == {"name": {"$regex": r"latte\ \(large\)", "$options": "i"}}


@pytest.mark.asyncio
async def test_find_by_ids_keeps_order():
    collection = make_collection()
    first, second = ObjectId(), ObjectId()
    collection.find = MagicMock(return_value=cursor_returning([{"_id": first}, {"_id": second}]))

    docs = await MongoRepository(collection).find_by_ids([second, first])

    assert [d["_id"] for d in docs] == [second, first]


@pytest.mark.asyncio
async def test_update_fields_returns_none_for_missing_document():
    collection = make_collection()
    collection.find_one_and_update = AsyncMock(return_value=None)

    assert await MongoRepository(collection).update_fields(str(ObjectId()), {"name": "Mocha"}) is None


class RecordingTransaction:
    def __init__(self, events):
        self.events = events

    async def __aenter__(self):
        self.events.append("begin")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.events.append("abort" if exc_type else "commit")
        return False


class RecordingSession:
    """Stands in for a motor client session and records its lifecycle."""

    def __init__(self):
        self.events = []

    async def __aenter__(self):
        self.events.append("start")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.events.append("end")
        return False

    def start_transaction(self):
        return RecordingTransaction(self.events)


def make_mongo_store(session):
    collections = {name: make_collection(name) for name in ("categories", "subcategories", "items")}
    db = MagicMock()
    db.__getitem__.side_effect = collections.__getitem__
    mongodb = MagicMock()
    mongodb.get_db.return_value = db
    mongodb.start_session = AsyncMock(return_value=session)
    return MongoStore(mongodb), collections


@pytest.mark.asyncio
async def test_item_creation_runs_in_one_mongo_transaction():
    session = RecordingSession()
    store, collections = make_mongo_store(session)
    parent_id, item_id = ObjectId(), ObjectId()
    collections["subcategories"].find_one = AsyncMock(return_value={"_id": parent_id, "name": "Hot Drinks", "items": []})
    collections["subcategories"].update_one = AsyncMock(return_value=MagicMock(matched_count=1))
    collections["items"].insert_one = AsyncMock(return_value=MagicMock(inserted_id=item_id))

    service = ItemService(store, TransactionCoordinator(store))
    latte = await service.create(ItemCreate(name="Latte", base_amount=120, discount=20, subcategory_id=str(parent_id)))

    assert latte.id == str(item_id)
    assert latte.total_amount == 100
    assert session.events == ["start", "begin", "commit", "end"]
    assert collections["subcategories"].find_one.call_args.kwargs["session"] is session
    assert collections["items"].insert_one.call_args.kwargs["session"] is session
    push_call = collections["subcategories"].update_one.call_args
    assert push_call.kwargs["session"] is session
    assert push_call.args[1]["$push"] == {"items": item_id}


@pytest.mark.asyncio
async def test_failed_push_aborts_mongo_transaction():
    session = RecordingSession()
    store, collections = make_mongo_store(session)
    parent_id = ObjectId()
    collections["categories"].find_one = AsyncMock(return_value={"_id": parent_id, "name": "Beverages", "items": []})
    collections["categories"].update_one = AsyncMock(side_effect=PyMongoError("WriteConflict"))
    collections["items"].insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))

    service = ItemService(store, TransactionCoordinator(store))
    with pytest.raises(TransactionFailure):
        await service.create(ItemCreate(name="Latte", base_amount=120, category_id=str(parent_id)))

    assert session.events == ["start", "begin", "abort", "end"]
