"""
FoodCycle Backend - Liveness and Health Routes
==============================================

What:  GET / answers with a plain-text liveness string (process is up).
       GET /health also pings the document store and reports 503 when it is
       unreachable, for load balancers that should route away.
"""

import logging
import time

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from foodcycle import __version__
from foodcycle.database import get_database, ping
from foodcycle.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

LIVENESS_MESSAGE = "FoodCycle server is running"

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Liveness check")
async def root() -> str:
    return LIVENESS_MESSAGE


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Document store unreachable", "model": HealthResponse}},
    summary="Service and document store health",
)
async def health_check(
    response: Response,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"
    try:
        await ping(db, attempts=1)
    except PyMongoError as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
