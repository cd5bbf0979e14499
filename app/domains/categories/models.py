# app/domains/categories/models.py

from enum import Enum
from typing import List, Optional

from app.domains.items.models import ItemOut
from app.domains.subcategories.models import SubcategoryOut
from app.shared.models import Amount, CamelModel, DocumentOut, Name, Number, UpdateModel, convert_objectid_to_str


class TaxType(str, Enum):
    PERCENTAGE = "Percentage"
    FIXED = "Fixed"
    NONE = "None"


class CategoryCreate(CamelModel):
    name: Name
    image: Optional[str] = None
    description: Optional[str] = None
    tax_applicability: bool = False
    tax: Amount = 0
    tax_type: TaxType = TaxType.NONE


class CategoryUpdate(UpdateModel):
    name: Optional[Name] = None
    image: Optional[str] = None
    description: Optional[str] = None
    tax_applicability: Optional[bool] = None
    tax: Optional[Amount] = None
    tax_type: Optional[TaxType] = None


class CategoryOut(DocumentOut):
    tax_applicability: bool
    tax: Number
    tax_type: TaxType
    subcategories: List[SubcategoryOut] = []
    items: List[ItemOut] = []


def to_category_out(doc: dict, subcategories: List[SubcategoryOut], items: List[ItemOut]) -> CategoryOut:
    data = convert_objectid_to_str(doc)
    data["subcategories"] = subcategories
    data["items"] = items
    return CategoryOut.model_validate(data)
