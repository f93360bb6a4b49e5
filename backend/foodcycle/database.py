"""
FoodCycle Backend - Document Store Client
=========================================

What:  Construction, health checks and request-time access for the MongoDB client.
How:   The application factory creates one AsyncIOMotorClient and stores it,
       together with the selected database, on `app.state`. Route handlers reach
       the database through the `get_database` dependency; there is no
       module-level client.
When:  Client created once per application; operations issued per request.

Connection behaviour:
    The motor client connects lazily, so building the app never blocks. The
    lifespan pings the server (with retries) and either logs a failure and
    keeps serving, or aborts startup when DB_ABORT_ON_STARTUP_FAILURE is set.
"""

import logging
from typing import Any, Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from foodcycle.config import Settings

logger = logging.getLogger(__name__)


# ── Collection Names ──────────────────────────────────────────────────────
FOODS_COLLECTION = "foods"
REQUESTS_COLLECTION = "myRequests"
NEWSLETTER_COLLECTION = "newsletterSubscribers"


def create_client(settings: Settings) -> AsyncIOMotorClient:
    """
    Build the motor client for the configured deployment.

    Server API v1 in strict mode pins the command surface the app relies on;
    serverSelectionTimeoutMS bounds how long any operation waits for a
    reachable server before raising.
    """
    return AsyncIOMotorClient(
        settings.mongo_uri,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        tz_aware=True,
    )


def get_database(request: Request) -> AsyncIOMotorDatabase:
    """
    FastAPI dependency returning the database owned by the running app.

    Example usage in a route:
        @router.get("/available-foods")
        async def list_available(db=Depends(get_database)):
            return await food_service.list_available(db)
    """
    return request.app.state.database


async def ping(
    database: AsyncIOMotorDatabase,
    attempts: int = 3,
    wait: Optional[Any] = None,
) -> None:
    """
    Verify the store is reachable, retrying transient driver failures.

    Retries use exponential backoff with jitter and log every retry at
    WARNING. The last driver error is re-raised once attempts run out.
    """
    async for attempt in AsyncRetrying(
        retry=retry_if_exception_type(PyMongoError),
        stop=stop_after_attempt(attempts),
        wait=wait or wait_exponential_jitter(initial=1, max=10, jitter=1),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            await database.command("ping")


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    """
    Create the indexes the handlers rely on.

    - newsletterSubscribers.email (unique): backs the duplicate-subscription
      check so two concurrent subscribes cannot both insert.
    - foods.status: used by the available and featured listings.

    Index creation failures are logged and otherwise ignored; the app still
    serves without them.
    """
    try:
        await database[NEWSLETTER_COLLECTION].create_index("email", unique=True)
        await database[FOODS_COLLECTION].create_index("status")
    except PyMongoError as e:
        logger.warning("Could not ensure indexes: %s", str(e))


def close_client(client: Optional[AsyncIOMotorClient]) -> None:
    """Close all pooled connections. Safe to call with no client."""
    if client is not None:
        client.close()
