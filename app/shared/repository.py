from abc import ABC, abstractmethod
from typing import List, Optional

CATEGORIES = "categories"
SUBCATEGORIES = "subcategories"
ITEMS = "items"


class Repository(ABC):
    """
    Create/read/update access to one collection.

    Ids are accepted as strings or ObjectIds; malformed ids simply match
    nothing. Every method takes an optional session so it can take part in a
    transaction opened by the store.
    """

    @abstractmethod
    async def insert(self, document: dict, session=None) -> dict:
        """Persist a new document, stamping created_at/updated_at. Returns it with its _id."""

    @abstractmethod
    async def find_by_id(self, document_id, session=None) -> Optional[dict]:
        ...

    @abstractmethod
    async def find_by_name(self, name: str, session=None) -> Optional[dict]:
        ...

    @abstractmethod
    async def find_all(self, session=None) -> List[dict]:
        ...

    @abstractmethod
    async def find_by_ids(self, ids, session=None) -> List[dict]:
        """Documents for the given ids, in the order of ids. Unknown ids are skipped."""

    @abstractmethod
    async def find_by_field(self, field: str, value, session=None) -> List[dict]:
        """Documents whose reference field equals the given id."""

    @abstractmethod
    async def search_name(self, term: str, session=None) -> List[dict]:
        """Case-insensitive literal substring match on name."""

    @abstractmethod
    async def update_fields(self, document_id, fields: dict, session=None) -> Optional[dict]:
        """Set the given fields and return the updated document, or None if it does not exist."""

    @abstractmethod
    async def push(self, document_id, field: str, value, session=None) -> bool:
        """Atomically append value to a list field. Returns False if the document does not exist."""


class Store(ABC):
    """The three catalog collections plus a way to write to them atomically."""

    categories: Repository
    subcategories: Repository
    items: Repository

    @abstractmethod
    def transaction(self):
        """
        Async context manager yielding a session. Writes made with the session
        are committed together when the block exits normally and discarded when
        it raises.
        """

    async def ensure_indexes(self):
        pass

    def close(self):
        pass
