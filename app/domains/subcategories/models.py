# app/domains/subcategories/models.py

from typing import List, Optional

from app.domains.items.models import ItemOut
from app.shared.models import Amount, CamelModel, DocumentOut, Name, Number, UpdateModel, convert_objectid_to_str


class SubcategoryFields(CamelModel):
    name: Name
    image: Optional[str] = None
    description: Optional[str] = None
    tax_applicability: bool
    tax: Amount = 0


class SubcategoryCreate(CamelModel):
    name: Name
    image: Optional[str] = None
    description: Optional[str] = None
    # Left as None to take the parent category's values
    tax_applicability: Optional[bool] = None
    tax: Optional[Amount] = None


class SubcategoryUpdate(UpdateModel):
    name: Optional[Name] = None
    image: Optional[str] = None
    description: Optional[str] = None
    tax_applicability: Optional[bool] = None
    tax: Optional[Amount] = None


class SubcategoryOut(DocumentOut):
    tax_applicability: bool
    tax: Number
    category: str
    items: List[ItemOut] = []


def to_subcategory_out(doc: dict, items: List[ItemOut]) -> SubcategoryOut:
    data = convert_objectid_to_str(doc)
    data["items"] = items
    return SubcategoryOut.model_validate(data)
