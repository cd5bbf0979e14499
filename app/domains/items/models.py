# app/domains/items/models.py

from typing import Optional

from app.shared.models import Amount, CamelModel, DocumentOut, Name, Number, UpdateModel, convert_objectid_to_str


class ItemFields(CamelModel):
    """Persisted, caller-editable fields of an item."""

    name: Name
    image: Optional[str] = None
    description: Optional[str] = None
    tax_applicability: bool = False
    tax: Amount = 0
    base_amount: Amount
    discount: Amount = 0


class ItemCreate(ItemFields):
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None


class ItemUpdate(UpdateModel):
    name: Optional[Name] = None
    image: Optional[str] = None
    description: Optional[str] = None
    tax_applicability: Optional[bool] = None
    tax: Optional[Amount] = None
    base_amount: Optional[Amount] = None
    discount: Optional[Amount] = None


class ItemOut(DocumentOut):
    tax_applicability: bool = False
    tax: Number = 0
    base_amount: Number
    discount: Number = 0
    total_amount: Number
    category: Optional[str] = None
    subcategory: Optional[str] = None


def total_amount(base_amount: Number, discount: Number) -> Number:
    return base_amount - discount


def check_item_placement(category_id: Optional[str], subcategory_id: Optional[str]) -> Optional[str]:
    """Return why the parent choice is invalid, or None when exactly one parent is given."""
    if category_id and subcategory_id:
        return "Item cannot belong to both a Category and a Subcategory."
    if not category_id and not subcategory_id:
        return "Item must belong to either a Category or a Subcategory."
    return None


def to_item_out(doc: dict) -> ItemOut:
    data = convert_objectid_to_str(doc)
    data["total_amount"] = total_amount(doc["base_amount"], doc.get("discount") or 0)
    return ItemOut.model_validate(data)
