# app/shared/models.py

from datetime import datetime
from typing import Annotated, Optional, Union

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

# Names are trimmed before the emptiness check
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
# Whole numbers stay ints so 120 is stored and returned as 120, not 120.0
Amount = Union[
    Annotated[int, Field(ge=0)],
    Annotated[float, Field(ge=0, allow_inf_nan=False)],
]
Number = Union[int, float]


class CamelModel(BaseModel):
    """Snake case in Python and MongoDB, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UpdateModel(CamelModel):
    # Unknown fields, parent links included, are refused rather than ignored
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class DocumentOut(CamelModel):
    id: str = Field(alias="_id")
    name: str
    image: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def convert_objectid_to_str(doc):
    if isinstance(doc, list):
        return [convert_objectid_to_str(d) for d in doc]
    if isinstance(doc, dict):
        return {k: (str(v) if isinstance(v, ObjectId) else convert_objectid_to_str(v)) for k, v in doc.items()}
    return doc


def first_error_message(error) -> str:
    """Readable message from a pydantic ValidationError."""
    errors = error.errors()
    if not errors:
        return str(error)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first['msg']}" if location else first["msg"]


def merge_for_update(model_cls, existing: dict, changes: dict) -> dict:
    """
    Apply changes over the stored document and validate the whole record.

    Returns the validated values of the changed fields, ready to be written.
    Raises pydantic.ValidationError when the merged record is invalid.
    """
    merged = {field: existing.get(field) for field in model_cls.model_fields if field in existing}
    merged.update(changes)
    record = model_cls.model_validate(merged)
    return record.model_dump(mode="json", include=set(changes))
