"""
FoodCycle Backend - Food Request Route Handlers
===============================================

What:  GET /my-requests (session required, email must match) and POST /my-requests.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from foodcycle.auth import Identity, ensure_same_email, require_identity
from foodcycle.database import get_database
from foodcycle.schemas.common import ErrorResponse, WriteResponse
from foodcycle.schemas.food_request import FoodRequestCreate, FoodRequestDocument
from foodcycle.services.food_request_service import food_request_service

router = APIRouter(tags=["Requests"])


@router.get(
    "/my-requests",
    response_model=List[FoodRequestDocument],
    responses={
        401: {"description": "Session cookie absent, expired or invalid", "model": ErrorResponse},
        403: {"description": "Email does not match the session", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="List the signed-in user's food requests",
)
async def list_my_requests(
    email: Optional[str] = Query(None, description="Requester email; must match the session"),
    identity: Identity = Depends(require_identity),
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> List[Dict[str, Any]]:
    owner = ensure_same_email(identity, email)
    return await food_request_service.list_by_user(db, owner)


@router.post(
    "/my-requests",
    status_code=201,
    response_model=WriteResponse,
    responses={500: {"description": "Store failure", "model": ErrorResponse}},
    summary="Record a request for a food",
)
async def add_request(
    food_request: FoodRequestCreate,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> WriteResponse:
    return await food_request_service.add_request(db, food_request.model_dump())
