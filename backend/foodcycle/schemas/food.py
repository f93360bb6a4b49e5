"""
FoodCycle Backend - Food Schemas
================================

What:  Request bodies and response documents for the food routes.
How:   The fields the handlers depend on (status, quantity, donator.email) are
       typed and validated; anything else the frontend sends (name, image,
       location, expiry date, notes) is accepted and stored as-is.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator

from foodcycle.models.documents import STATUS_AVAILABLE
from foodcycle.schemas.common import DocumentBody, Email


Quantity = Union[int, float]


def _non_negative(v: Optional[Quantity]) -> Optional[Quantity]:
    if v is not None and v < 0:
        raise ValueError("quantity must be zero or greater")
    return v


class Donator(BaseModel):
    """Embedded donor; `email` is the key for "my foods" lookups."""
    email: Email
    model_config = {"extra": "allow"}


class FoodCreate(DocumentBody):
    """Body of POST /add-food."""
    quantity: Quantity = Field(description="Amount on offer; sort key for featured foods")
    status: str = Field(default=STATUS_AVAILABLE, min_length=1, description="Available, Requested, ...")
    donator: Donator

    @field_validator("quantity")
    @classmethod
    def check_quantity(cls, v):
        return _non_negative(v)


class FoodUpdate(DocumentBody):
    """
    Body of PATCH /foods/{id}: any subset of fields, merged into the stored document.

    Only the fields present in the request are written.
    """
    quantity: Optional[Quantity] = None
    status: Optional[str] = Field(default=None, min_length=1)
    donator: Optional[Donator] = None

    @field_validator("quantity")
    @classmethod
    def check_quantity(cls, v):
        return _non_negative(v)

    def changes(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        data.update(self.model_extra or {})
        return data


class FoodStatusUpdate(BaseModel):
    """Body of PATCH /foods/{id}/status."""
    status: str = Field(min_length=1)
    model_config = {"extra": "forbid"}


class FoodDocument(BaseModel):
    """
    A stored food as returned to clients.

    Carries `_id` (string form of the ObjectId) plus every stored field.
    """
    id: str = Field(alias="_id")
    model_config = {"extra": "allow", "populate_by_name": True}
