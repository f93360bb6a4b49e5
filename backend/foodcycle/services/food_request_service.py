"""
FoodCycle Backend - Food Request Service
========================================

What:  A user's requests against donated foods (`myRequests` collection).
How:   Insert and list-by-user only; requests are never updated or deleted
       through the API.
"""

import logging
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from foodcycle.database import REQUESTS_COLLECTION
from foodcycle.exceptions import DatabaseError
from foodcycle.models.documents import serialize_document, serialize_write_result
from foodcycle.schemas.common import WriteResponse

logger = logging.getLogger(__name__)


class FoodRequestService:

    async def list_by_user(self, db: AsyncIOMotorDatabase, email: str) -> List[Dict[str, Any]]:
        try:
            docs = await db[REQUESTS_COLLECTION].find({"userEmail": email}).to_list(length=None)
        except PyMongoError as e:
            logger.error("Error fetching my requests: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to fetch my requests")
        return [serialize_document(doc) for doc in docs]

    async def add_request(self, db: AsyncIOMotorDatabase, request: Dict[str, Any]) -> WriteResponse:
        document = dict(request)
        try:
            result = await db[REQUESTS_COLLECTION].insert_one(document)
        except PyMongoError as e:
            logger.error("Error adding to my requests: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to add request")
        return WriteResponse(message="Request added successfully", data=serialize_write_result(result))


food_request_service = FoodRequestService()
