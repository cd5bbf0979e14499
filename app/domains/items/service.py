import logging
from typing import List

from pydantic import ValidationError as PydanticValidationError

from app.domains.items.models import (
    ItemCreate,
    ItemFields,
    ItemOut,
    ItemUpdate,
    check_item_placement,
    to_item_out,
)
from app.shared.errors import NotFound, ValidationError
from app.shared.lookup import resolve_by_id_or_name
from app.shared.models import first_error_message, merge_for_update
from app.shared.repository import Repository, Store
from app.shared.transaction import TransactionCoordinator

logger = logging.getLogger(__name__)


async def resolve_items(items: Repository, ids, session=None) -> List[ItemOut]:
    """Full item records for a parent's child list, in list order."""
    return [to_item_out(doc) for doc in await items.find_by_ids(ids, session=session)]


class ItemService:
    def __init__(self, store: Store, coordinator: TransactionCoordinator):
        self.store = store
        self.items = store.items
        self.coordinator = coordinator

    async def create(self, data: ItemCreate) -> ItemOut:
        problem = check_item_placement(data.category_id, data.subcategory_id)
        if problem:
            raise ValidationError(problem)

        if data.category_id:
            parents, parent_id, parent_field = self.store.categories, data.category_id, "category"
        else:
            parents, parent_id, parent_field = self.store.subcategories, data.subcategory_id, "subcategory"

        document = data.model_dump(mode="json", include=set(ItemFields.model_fields))

        async def unit_of_work(session):
            parent = await parents.find_by_id(parent_id, session=session)
            if parent is None:
                raise NotFound(f"Parent {parent_field} not found")

            document["category"] = parent["_id"] if parent_field == "category" else None
            document["subcategory"] = parent["_id"] if parent_field == "subcategory" else None
            created = await self.items.insert(document, session=session)

            # Add this item to its parent's item list
            if not await parents.push(parent["_id"], "items", created["_id"], session=session):
                raise NotFound(f"Parent {parent_field} not found")
            return created

        created = await self.coordinator.run(unit_of_work, "item creation")
        logger.info(f"Created item {created['_id']} under {parent_field} {parent_id}")
        return to_item_out(created)

    async def get_all(self) -> List[ItemOut]:
        return [to_item_out(doc) for doc in await self.items.find_all()]

    async def get_by_category(self, category_id: str) -> List[ItemOut]:
        return [to_item_out(doc) for doc in await self.items.find_by_field("category", category_id)]

    async def get_by_subcategory(self, subcategory_id: str) -> List[ItemOut]:
        return [to_item_out(doc) for doc in await self.items.find_by_field("subcategory", subcategory_id)]

    async def get_by_id_or_name(self, token: str) -> ItemOut:
        doc = await resolve_by_id_or_name(self.items, token)
        if doc is None:
            raise NotFound("Item not found")
        return to_item_out(doc)

    async def edit(self, item_id: str, data: ItemUpdate) -> ItemOut:
        existing = await self.items.find_by_id(item_id)
        if existing is None:
            raise NotFound("Item not found")

        try:
            fields = merge_for_update(ItemFields, existing, data.model_dump(exclude_unset=True))
        except PydanticValidationError as e:
            raise ValidationError(first_error_message(e)) from e

        updated = await self.items.update_fields(item_id, fields)
        if updated is None:
            raise NotFound("Item not found")
        logger.info(f"Updated item {item_id}: {sorted(fields)}")
        # total_amount is derived again from the stored fields
        return to_item_out(updated)

    async def search_by_name(self, term) -> List[ItemOut]:
        if not term or not term.strip():
            raise ValidationError("Name query parameter is required")

        items = await self.items.search_name(term)
        if not items:
            raise NotFound("No items found matching that name")
        return [to_item_out(doc) for doc in items]
