"""
FoodCycle Backend - Auth Route Handlers
=======================================

What:  POST /jwt issues the session cookie; POST /logout clears it.
How:   The frontend signs users in with its identity provider, then posts the
       signed-in user's email here. The backend signs that claim into a token
       valid for TOKEN_TTL_HOURS and sets it as an http-only cookie.

Cookie attributes:
    development  HttpOnly; SameSite=Strict
    production   HttpOnly; Secure; SameSite=None (frontend on another site)
"""

import logging

from fastapi import APIRouter, Depends, Response

from foodcycle.auth import (
    TokenService,
    clear_token_cookie,
    get_app_settings,
    get_token_service,
    set_token_cookie,
)
from foodcycle.config import Settings
from foodcycle.schemas.auth import TokenRequest
from foodcycle.schemas.common import AuthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post(
    "/jwt",
    response_model=AuthResponse,
    responses={422: {"description": "Missing or invalid email"}},
    summary="Issue the session cookie for a signed-in user",
)
async def issue_token(
    body: TokenRequest,
    response: Response,
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    token = tokens.issue(body.claims())
    set_token_cookie(response, token, settings)
    logger.info("Issued session token for %s", body.email)
    return AuthResponse(success=True)


@router.post(
    "/logout",
    response_model=AuthResponse,
    summary="Clear the session cookie",
)
async def logout(
    response: Response,
    settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    clear_token_cookie(response, settings)
    return AuthResponse(success=True)
