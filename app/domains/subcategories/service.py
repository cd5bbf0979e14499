import logging
from typing import List

from pydantic import ValidationError as PydanticValidationError

from app.domains.items.service import resolve_items
from app.domains.subcategories.models import (
    SubcategoryCreate,
    SubcategoryFields,
    SubcategoryOut,
    SubcategoryUpdate,
    to_subcategory_out,
)
from app.shared.errors import NotFound, ValidationError
from app.shared.lookup import resolve_by_id_or_name
from app.shared.models import first_error_message, merge_for_update
from app.shared.repository import Store
from app.shared.transaction import TransactionCoordinator

logger = logging.getLogger(__name__)


async def resolve_subcategory(store: Store, doc: dict, session=None) -> SubcategoryOut:
    items = await resolve_items(store.items, doc.get("items", []), session=session)
    return to_subcategory_out(doc, items)


class SubcategoryService:
    def __init__(self, store: Store, coordinator: TransactionCoordinator):
        self.store = store
        self.subcategories = store.subcategories
        self.coordinator = coordinator

    async def create(self, category_id: str, data: SubcategoryCreate) -> SubcategoryOut:
        async def unit_of_work(session):
            category = await self.store.categories.find_by_id(category_id, session=session)
            if category is None:
                raise NotFound("Category not found")

            # Tax settings default to the category's values at this moment
            record = SubcategoryFields(
                name=data.name,
                image=data.image,
                description=data.description,
                tax_applicability=(
                    data.tax_applicability
                    if data.tax_applicability is not None
                    else category.get("tax_applicability", False)
                ),
                tax=data.tax if data.tax is not None else category.get("tax", 0),
            )
            document = record.model_dump(mode="json")
            document["category"] = category["_id"]
            document["items"] = []
            created = await self.subcategories.insert(document, session=session)

            if not await self.store.categories.push(
                category["_id"], "subcategories", created["_id"], session=session
            ):
                raise NotFound("Category not found")
            return created

        created = await self.coordinator.run(unit_of_work, "subcategory creation")
        logger.info(f"Created subcategory {created['_id']} under category {category_id}")
        return to_subcategory_out(created, [])

    async def get_all(self) -> List[SubcategoryOut]:
        return [await resolve_subcategory(self.store, doc) for doc in await self.subcategories.find_all()]

    async def get_by_category(self, category_id: str) -> List[SubcategoryOut]:
        docs = await self.subcategories.find_by_field("category", category_id)
        return [await resolve_subcategory(self.store, doc) for doc in docs]

    async def get_by_id_or_name(self, token: str) -> SubcategoryOut:
        doc = await resolve_by_id_or_name(self.subcategories, token)
        if doc is None:
            raise NotFound("Subcategory not found")
        return await resolve_subcategory(self.store, doc)

    async def edit(self, subcategory_id: str, data: SubcategoryUpdate) -> SubcategoryOut:
        existing = await self.subcategories.find_by_id(subcategory_id)
        if existing is None:
            raise NotFound("Subcategory not found")

        try:
            fields = merge_for_update(SubcategoryFields, existing, data.model_dump(exclude_unset=True))
        except PydanticValidationError as e:
            raise ValidationError(first_error_message(e)) from e

        updated = await self.subcategories.update_fields(subcategory_id, fields)
        if updated is None:
            raise NotFound("Subcategory not found")
        logger.info(f"Updated subcategory {subcategory_id}: {sorted(fields)}")
        return await resolve_subcategory(self.store, updated)
