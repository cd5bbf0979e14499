import datetime
import logging
import re
from contextlib import asynccontextmanager
from typing import List, Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.config.mongodb import MongoDB
from app.shared.errors import DuplicateName, StoreError
from app.shared.lookup import parse_object_id
from app.shared.repository import CATEGORIES, ITEMS, SUBCATEGORIES, Repository, Store

logger = logging.getLogger(__name__)


def utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class MongoRepository(Repository):
    def __init__(self, collection, duplicate_message: Optional[str] = None):
        self.collection = collection
        self.duplicate_message = duplicate_message

    def _store_error(self, action: str, e: Exception):
        if isinstance(e, DuplicateKeyError) and self.duplicate_message:
            return DuplicateName(self.duplicate_message)
        logger.error(f"MongoDB {action} on '{self.collection.name}' failed: {e}")
        return StoreError(f"Failed to {action} {self.collection.name}")

    async def insert(self, document: dict, session=None) -> dict:
        now = utcnow()
        document = {**document, "created_at": now, "updated_at": now}
        try:
            result = await self.collection.insert_one(document, session=session)
        except PyMongoError as e:
            raise self._store_error("insert into", e) from e
        document["_id"] = result.inserted_id
        return document

    async def find_by_id(self, document_id, session=None) -> Optional[dict]:
        oid = parse_object_id(document_id)
        if oid is None:
            return None
        try:
            return await self.collection.find_one({"_id": oid}, session=session)
        except PyMongoError as e:
            raise self._store_error("read", e) from e

    async def find_by_name(self, name: str, session=None) -> Optional[dict]:
        try:
            return await self.collection.find_one({"name": name}, session=session)
        except PyMongoError as e:
            raise self._store_error("read", e) from e

    async def _find(self, query: dict, session=None) -> List[dict]:
        try:
            cursor = self.collection.find(query, session=session)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._store_error("read", e) from e

    async def find_all(self, session=None) -> List[dict]:
        return await self._find({}, session=session)

    async def find_by_ids(self, ids, session=None) -> List[dict]:
        oids = [oid for oid in (parse_object_id(i) for i in ids) if oid is not None]
        if not oids:
            return []
        documents = await self._find({"_id": {"$in": oids}}, session=session)
        by_id = {doc["_id"]: doc for doc in documents}
        return [by_id[oid] for oid in oids if oid in by_id]

    async def find_by_field(self, field: str, value, session=None) -> List[dict]:
        oid = parse_object_id(value)
        if oid is None:
            return []
        return await self._find({field: oid}, session=session)

    async def search_name(self, term: str, session=None) -> List[dict]:
        return await self._find({"name": {"$regex": re.escape(term), "$options": "i"}}, session=session)

    async def update_fields(self, document_id, fields: dict, session=None) -> Optional[dict]:
        oid = parse_object_id(document_id)
        if oid is None:
            return None
        try:
            return await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": {**fields, "updated_at": utcnow()}},
                return_document=ReturnDocument.AFTER,
                session=session,
            )
        except PyMongoError as e:
            raise self._store_error("update", e) from e

    async def push(self, document_id, field: str, value, session=None) -> bool:
        oid = parse_object_id(document_id)
        if oid is None:
            return False
        try:
            result = await self.collection.update_one(
                {"_id": oid},
                {"$push": {field: value}, "$set": {"updated_at": utcnow()}},
                session=session,
            )
        except PyMongoError as e:
            raise self._store_error("update", e) from e
        return result.matched_count == 1


class MongoStore(Store):
    def __init__(self, mongodb: MongoDB):
        self.mongodb = mongodb
        db = mongodb.get_db()
        if db is None:
            raise Exception("MongoDB not connected")
        self.categories = MongoRepository(db[CATEGORIES], duplicate_message="Category already exists")
        self.subcategories = MongoRepository(db[SUBCATEGORIES])
        self.items = MongoRepository(db[ITEMS])

    @asynccontextmanager
    async def transaction(self):
        async with await self.mongodb.start_session() as session:
            async with session.start_transaction():
                yield session

    async def ensure_indexes(self):
        await self.categories.collection.create_index([("name", ASCENDING)], unique=True)
        await self.subcategories.collection.create_index([("category", ASCENDING)])
        await self.items.collection.create_index([("category", ASCENDING)])
        await self.items.collection.create_index([("subcategory", ASCENDING)])
        logger.info("MongoDB indexes ensured")

    def close(self):
        self.mongodb.close()
