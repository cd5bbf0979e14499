import asyncio
import copy
import datetime
from contextlib import asynccontextmanager
from typing import List, Optional

from bson import ObjectId

from app.shared.errors import DuplicateName
from app.shared.lookup import parse_object_id
from app.shared.repository import CATEGORIES, ITEMS, SUBCATEGORIES, Repository, Store


class MemorySession:
    """Private copy of every collection that a transaction writes to."""

    def __init__(self, data: dict):
        self.data = data


class MemoryRepository(Repository):
    def __init__(self, store: "MemoryStore", name: str, duplicate_message: Optional[str] = None):
        self.store = store
        self.name = name
        self.duplicate_message = duplicate_message

    def _documents(self, session) -> dict:
        if session is not None:
            return session.data[self.name]
        return self.store.data[self.name]

    @asynccontextmanager
    async def _writable(self, session):
        # Outside a transaction a single write still waits for open transactions
        if session is not None:
            yield session.data[self.name]
        else:
            async with self.store.lock:
                yield self.store.data[self.name]

    def _check_unique_name(self, documents: dict, name, own_id=None):
        if not self.duplicate_message:
            return
        for doc in documents.values():
            if doc.get("name") == name and doc["_id"] != own_id:
                raise DuplicateName(self.duplicate_message)

    async def insert(self, document: dict, session=None) -> dict:
        now = datetime.datetime.now(datetime.timezone.utc)
        document = {**copy.deepcopy(document), "_id": ObjectId(), "created_at": now, "updated_at": now}
        async with self._writable(session) as documents:
            self._check_unique_name(documents, document.get("name"))
            documents[document["_id"]] = document
        return copy.deepcopy(document)

    async def find_by_id(self, document_id, session=None) -> Optional[dict]:
        doc = self._documents(session).get(parse_object_id(document_id))
        return copy.deepcopy(doc) if doc is not None else None

    async def find_by_name(self, name: str, session=None) -> Optional[dict]:
        for doc in self._documents(session).values():
            if doc.get("name") == name:
                return copy.deepcopy(doc)
        return None

    async def find_all(self, session=None) -> List[dict]:
        return [copy.deepcopy(doc) for doc in self._documents(session).values()]

    async def find_by_ids(self, ids, session=None) -> List[dict]:
        documents = self._documents(session)
        found = []
        for document_id in ids:
            doc = documents.get(parse_object_id(document_id))
            if doc is not None:
                found.append(copy.deepcopy(doc))
        return found

    async def find_by_field(self, field: str, value, session=None) -> List[dict]:
        oid = parse_object_id(value)
        if oid is None:
            return []
        return [copy.deepcopy(doc) for doc in self._documents(session).values() if doc.get(field) == oid]

    async def search_name(self, term: str, session=None) -> List[dict]:
        term = term.lower()
        return [
            copy.deepcopy(doc)
            for doc in self._documents(session).values()
            if term in (doc.get("name") or "").lower()
        ]

    async def update_fields(self, document_id, fields: dict, session=None) -> Optional[dict]:
        oid = parse_object_id(document_id)
        async with self._writable(session) as documents:
            doc = documents.get(oid)
            if doc is None:
                return None
            if "name" in fields:
                self._check_unique_name(documents, fields["name"], own_id=oid)
            doc.update(copy.deepcopy(fields))
            doc["updated_at"] = datetime.datetime.now(datetime.timezone.utc)
            return copy.deepcopy(doc)

    async def push(self, document_id, field: str, value, session=None) -> bool:
        oid = parse_object_id(document_id)
        async with self._writable(session) as documents:
            doc = documents.get(oid)
            if doc is None:
                return False
            doc.setdefault(field, []).append(value)
            doc["updated_at"] = datetime.datetime.now(datetime.timezone.utc)
            return True


class MemoryStore(Store):
    """
    Process-local store used for development and tests.

    Transactions are serialized by a lock and work on a copy of the data which
    replaces the live data only on commit, so readers never see half of one.
    """

    def __init__(self):
        self.data = {CATEGORIES: {}, SUBCATEGORIES: {}, ITEMS: {}}
        self.lock = asyncio.Lock()
        self.categories = MemoryRepository(self, CATEGORIES, duplicate_message="Category already exists")
        self.subcategories = MemoryRepository(self, SUBCATEGORIES)
        self.items = MemoryRepository(self, ITEMS)

    @asynccontextmanager
    async def transaction(self):
        async with self.lock:
            session = MemorySession(copy.deepcopy(self.data))
            yield session
            self.data = session.data
