import logging
from typing import List

from pydantic import ValidationError as PydanticValidationError

from app.domains.categories.models import CategoryCreate, CategoryOut, CategoryUpdate, to_category_out
from app.domains.items.service import resolve_items
from app.domains.subcategories.service import resolve_subcategory
from app.shared.errors import DuplicateName, NotFound, ValidationError
from app.shared.lookup import resolve_by_id_or_name
from app.shared.models import first_error_message, merge_for_update
from app.shared.repository import Store

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, store: Store):
        self.store = store
        self.categories = store.categories

    async def _resolve(self, doc: dict) -> CategoryOut:
        subcategory_docs = await self.store.subcategories.find_by_ids(doc.get("subcategories", []))
        subcategories = [await resolve_subcategory(self.store, sub) for sub in subcategory_docs]
        items = await resolve_items(self.store.items, doc.get("items", []))
        return to_category_out(doc, subcategories, items)

    async def create(self, data: CategoryCreate) -> CategoryOut:
        if await self.categories.find_by_name(data.name) is not None:
            raise DuplicateName("Category already exists")

        document = data.model_dump(mode="json")
        document["subcategories"] = []
        document["items"] = []
        created = await self.categories.insert(document)
        logger.info(f"Created category {created['_id']} ({created['name']})")
        return to_category_out(created, [], [])

    async def get_all(self) -> List[CategoryOut]:
        return [await self._resolve(doc) for doc in await self.categories.find_all()]

    async def get_by_id_or_name(self, token: str) -> CategoryOut:
        doc = await resolve_by_id_or_name(self.categories, token)
        if doc is None:
            raise NotFound("Category not found")
        return await self._resolve(doc)

    async def edit(self, category_id: str, data: CategoryUpdate) -> CategoryOut:
        existing = await self.categories.find_by_id(category_id)
        if existing is None:
            raise NotFound("Category not found")

        try:
            fields = merge_for_update(CategoryCreate, existing, data.model_dump(exclude_unset=True))
        except PydanticValidationError as e:
            raise ValidationError(first_error_message(e)) from e

        if "name" in fields and fields["name"] != existing["name"]:
            other = await self.categories.find_by_name(fields["name"])
            if other is not None and other["_id"] != existing["_id"]:
                raise DuplicateName("Category already exists")

        updated = await self.categories.update_fields(category_id, fields)
        if updated is None:
            raise NotFound("Category not found")
        logger.info(f"Updated category {category_id}: {sorted(fields)}")
        return await self._resolve(updated)
