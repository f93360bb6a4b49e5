"""
FoodCycle Backend - Food Route Handlers
=======================================

What:  Listing, lookup and writes for donated foods.
How:   Identifiers are parsed at the boundary (400 on a malformed id), bodies
       are validated by their schemas (422), and each handler makes one
       FoodService call.

Access:
    GET /my-foods requires the session cookie and the queried email must be
    the token's email. The other food routes are open; delete and update do
    not check ownership.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from foodcycle.auth import Identity, ensure_same_email, require_identity
from foodcycle.database import get_database
from foodcycle.models.documents import parse_object_id
from foodcycle.schemas.common import ErrorResponse, WriteResponse
from foodcycle.schemas.food import FoodCreate, FoodDocument, FoodStatusUpdate, FoodUpdate
from foodcycle.services.food_service import food_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Foods"])

SERVER_ERROR = {500: {"description": "Store failure", "model": ErrorResponse}}
BAD_ID = {400: {"description": "Malformed identifier", "model": ErrorResponse}}


@router.get(
    "/available-foods",
    response_model=List[FoodDocument],
    responses=SERVER_ERROR,
    summary="List foods whose status is Available",
)
async def list_available_foods(
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await food_service.list_available(db)


@router.get(
    "/available-foods/{food_id}",
    response_model=FoodDocument,
    responses={
        **BAD_ID,
        404: {"description": "No food with this identifier", "model": ErrorResponse},
        **SERVER_ERROR,
    },
    summary="Get one food by identifier",
)
async def get_food(
    food_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> Dict[str, Any]:
    return await food_service.get_food(db, parse_object_id(food_id))


@router.get(
    "/featured-foods",
    response_model=List[FoodDocument],
    responses=SERVER_ERROR,
    summary="Top six available foods by quantity",
)
async def list_featured_foods(
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await food_service.list_featured(db)


@router.get(
    "/my-foods",
    response_model=List[FoodDocument],
    responses={
        401: {"description": "Session cookie absent, expired or invalid", "model": ErrorResponse},
        403: {"description": "Email does not match the session", "model": ErrorResponse},
        **SERVER_ERROR,
    },
    summary="List foods donated by the signed-in user",
)
async def list_my_foods(
    email: Optional[str] = Query(None, description="Donator email; must match the session"),
    identity: Identity = Depends(require_identity),
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> List[Dict[str, Any]]:
    owner = ensure_same_email(identity, email)
    return await food_service.list_by_donator(db, owner)


@router.post(
    "/add-food",
    status_code=201,
    response_model=WriteResponse,
    responses=SERVER_ERROR,
    summary="Add a donated food",
)
async def add_food(
    food: FoodCreate,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> WriteResponse:
    return await food_service.add_food(db, food.model_dump())


@router.patch(
    "/foods/{food_id}",
    response_model=WriteResponse,
    responses={**BAD_ID, **SERVER_ERROR},
    summary="Merge fields into a food",
    description="Only the fields present in the body are written; matchedCount 0 means no such food.",
)
async def update_food(
    food_id: str,
    changes: FoodUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> WriteResponse:
    return await food_service.update_food(db, parse_object_id(food_id), changes.changes())


@router.patch(
    "/foods/{food_id}/status",
    response_model=WriteResponse,
    responses={**BAD_ID, **SERVER_ERROR},
    summary="Set only the status of a food",
)
async def update_food_status(
    food_id: str,
    body: FoodStatusUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> WriteResponse:
    return await food_service.update_status(db, parse_object_id(food_id), body.status)


@router.delete(
    "/foods/{food_id}",
    response_model=WriteResponse,
    responses={**BAD_ID, **SERVER_ERROR},
    summary="Delete a food",
    description="Deleting an unknown identifier succeeds with deletedCount 0.",
)
async def delete_food(
    food_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> WriteResponse:
    return await food_service.delete_food(db, parse_object_id(food_id))
