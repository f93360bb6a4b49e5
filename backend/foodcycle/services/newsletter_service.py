"""
FoodCycle Backend - Newsletter Service
======================================

What:  Newsletter subscriptions (`newsletterSubscribers` collection).
How:   A pre-insert existence check rejects known emails with ConflictError.
       Two concurrent subscribes can both pass that check; the unique index
       created at startup then rejects the second insert, which is reported
       as the same conflict.

Stored document: {email, subscribedAt}
"""

import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from foodcycle.database import NEWSLETTER_COLLECTION
from foodcycle.exceptions import ConflictError, DatabaseError
from foodcycle.models.documents import serialize_write_result
from foodcycle.schemas.common import WriteResponse

logger = logging.getLogger(__name__)

ALREADY_SUBSCRIBED = "This email is already subscribed"


class NewsletterService:

    async def subscribe(self, db: AsyncIOMotorDatabase, email: str) -> WriteResponse:
        """
        Register `email` (already normalized by the request schema).

        Raises:
            ConflictError: email is already subscribed (→ 409)
            DatabaseError: lookup or insert failed (→ 500)
        """
        collection = db[NEWSLETTER_COLLECTION]
        try:
            existing = await collection.find_one({"email": email})
            if existing is not None:
                raise ConflictError(message=ALREADY_SUBSCRIBED, context={"email": email})

            result = await collection.insert_one(
                {"email": email, "subscribedAt": datetime.now(timezone.utc)}
            )
        except DuplicateKeyError:
            logger.info("Concurrent duplicate subscription for %s", email)
            raise ConflictError(message=ALREADY_SUBSCRIBED, context={"email": email})
        except PyMongoError as e:
            logger.error("Error subscribing to newsletter: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to subscribe")

        logger.info("Newsletter subscription added: %s", email)
        return WriteResponse(message="Subscribed successfully", data=serialize_write_result(result))


newsletter_service = NewsletterService()
