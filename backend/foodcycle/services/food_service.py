"""
FoodCycle Backend - Food Service
================================

What:  Business operations on the `foods` collection.
How:   Each method performs exactly one store operation. Driver failures are
       logged with their traceback and re-raised as DatabaseError carrying an
       operation-specific message; the global handler turns that into a 500.
Who:   Called by the food route handlers.

Design:
    FoodService is stateless. The database is passed into every call by the
    route (via the `get_database` dependency), so one instance serves every
    application and every test.

Status lifecycle:
    status is a free-text field. The frontend writes "Available" on create and
    "Requested" when a user claims the item; any value can be written over any
    other. Only "Available" has meaning here: it selects the public listings.
"""

import logging
from typing import Any, Dict, List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from foodcycle.database import FOODS_COLLECTION
from foodcycle.exceptions import DatabaseError, NotFoundError, ValidationError
from foodcycle.models.documents import (
    FEATURED_LIMIT,
    STATUS_AVAILABLE,
    serialize_document,
    serialize_write_result,
)
from foodcycle.schemas.common import WriteResponse

logger = logging.getLogger(__name__)


class FoodService:
    """
    Operations:
        list_available / list_featured   public listings
        get_food                         single item (NotFoundError on miss)
        list_by_donator                  items whose donator.email matches
        add_food / update_food / update_status / delete_food   writes
    """

    async def list_available(self, db: AsyncIOMotorDatabase) -> List[Dict[str, Any]]:
        """
        All foods whose status is exactly "Available" (case-sensitive).

        No pagination: the full matching set is returned.
        """
        try:
            docs = await db[FOODS_COLLECTION].find({"status": STATUS_AVAILABLE}).to_list(length=None)
        except PyMongoError as e:
            logger.error("Error fetching foods: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to fetch foods")
        return [serialize_document(doc) for doc in docs]

    async def list_featured(
        self, db: AsyncIOMotorDatabase, limit: int = FEATURED_LIMIT
    ) -> List[Dict[str, Any]]:
        """
        Top `limit` available foods by quantity, largest first.

        Ties come back in whatever order the store returns them.
        """
        try:
            cursor = (
                db[FOODS_COLLECTION]
                .find({"status": STATUS_AVAILABLE})
                .sort("quantity", DESCENDING)
                .limit(limit)
            )
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            logger.error("Error fetching featured foods: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to fetch featured foods")
        return [serialize_document(doc) for doc in docs]

    async def get_food(self, db: AsyncIOMotorDatabase, food_id: ObjectId) -> Dict[str, Any]:
        """
        Fetch one food by identifier, whatever its status.

        Raises:
            NotFoundError: no document has this identifier (→ 404)
            DatabaseError: the lookup failed (→ 500)
        """
        try:
            doc = await db[FOODS_COLLECTION].find_one({"_id": food_id})
        except PyMongoError as e:
            logger.error("Error getting food by ID %s: %s", food_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch food by ID",
                context={"food_id": str(food_id)},
            )
        if doc is None:
            raise NotFoundError(resource="food", resource_id=str(food_id))
        return serialize_document(doc)

    async def list_by_donator(self, db: AsyncIOMotorDatabase, email: str) -> List[Dict[str, Any]]:
        """Foods donated by `email` (matched against the embedded donator.email)."""
        try:
            docs = await db[FOODS_COLLECTION].find({"donator.email": email}).to_list(length=None)
        except PyMongoError as e:
            logger.error("Error fetching my foods: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to fetch my foods")
        return [serialize_document(doc) for doc in docs]

    async def add_food(self, db: AsyncIOMotorDatabase, food: Dict[str, Any]) -> WriteResponse:
        # insert_one adds `_id` to the dict it is given; keep the caller's copy clean
        document = dict(food)
        try:
            result = await db[FOODS_COLLECTION].insert_one(document)
        except PyMongoError as e:
            logger.error("Error adding food: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to add food")
        logger.info("Food %s added by %s", result.inserted_id, document.get("donator", {}).get("email"))
        return WriteResponse(message="Food added successfully", data=serialize_write_result(result))

    async def update_food(
        self, db: AsyncIOMotorDatabase, food_id: ObjectId, changes: Dict[str, Any]
    ) -> WriteResponse:
        """
        Merge `changes` into the stored document ($set); untouched fields stay.

        Raises:
            ValidationError: `changes` is empty (→ 400)
        """
        if not changes:
            raise ValidationError(message="No fields to update")
        try:
            result = await db[FOODS_COLLECTION].update_one({"_id": food_id}, {"$set": changes})
        except PyMongoError as e:
            logger.error("Error updating food %s: %s", food_id, str(e), exc_info=True)
            raise DatabaseError(message="Failed to update food", context={"food_id": str(food_id)})
        return WriteResponse(message="Food updated successfully", data=serialize_write_result(result))

    async def update_status(
        self, db: AsyncIOMotorDatabase, food_id: ObjectId, status: str
    ) -> WriteResponse:
        try:
            result = await db[FOODS_COLLECTION].update_one({"_id": food_id}, {"$set": {"status": status}})
        except PyMongoError as e:
            logger.error("Error updating food status %s: %s", food_id, str(e), exc_info=True)
            raise DatabaseError(message="Failed to update food status", context={"food_id": str(food_id)})
        return WriteResponse(
            message="Food status updated successfully",
            data=serialize_write_result(result),
        )

    async def delete_food(self, db: AsyncIOMotorDatabase, food_id: ObjectId) -> WriteResponse:
        """
        Delete by identifier. A missing identifier is not an error: the
        envelope reports deletedCount 0.
        """
        try:
            result = await db[FOODS_COLLECTION].delete_one({"_id": food_id})
        except PyMongoError as e:
            logger.error("Error deleting food %s: %s", food_id, str(e), exc_info=True)
            raise DatabaseError(message="Failed to delete food", context={"food_id": str(food_id)})
        return WriteResponse(message="Food deleted successfully", data=serialize_write_result(result))


# ── Singleton Instance ────────────────────────────────────────────────────
food_service = FoodService()
