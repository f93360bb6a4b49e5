"""
FoodCycle Backend - Food Request Schemas
========================================

What:  Bodies and documents for a user's requests against donated foods.
"""

from pydantic import BaseModel, Field

from foodcycle.schemas.common import DocumentBody, Email


class FoodRequestCreate(DocumentBody):
    """Body of POST /my-requests; `userEmail` is the only key requests are looked up by."""
    userEmail: Email


class FoodRequestDocument(BaseModel):
    id: str = Field(alias="_id")
    model_config = {"extra": "allow", "populate_by_name": True}
