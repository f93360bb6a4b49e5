from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from foodcycle.database import get_database
from foodcycle.schemas.common import ErrorResponse, WriteResponse
from foodcycle.schemas.newsletter import NewsletterSubscribe
from foodcycle.services.newsletter_service import newsletter_service

router = APIRouter(tags=["Newsletter"])


@router.post(
    "/newsletter-subscribe",
    status_code=201,
    response_model=WriteResponse,
    responses={
        409: {"description": "Email already subscribed", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Subscribe an email to the newsletter",
)
async def subscribe(
    body: NewsletterSubscribe,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> WriteResponse:
    return await newsletter_service.subscribe(db, body.email)
