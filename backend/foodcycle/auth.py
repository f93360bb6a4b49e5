"""
FoodCycle Backend - Cookie Token Authentication
===============================================

What:  Issues and verifies the signed session token carried in the `token` cookie.
How:   HS256 JWTs (PyJWT) with a fixed validity window. `TokenService.verify`
       is the single verification entry point and returns a typed result
       instead of raising; the `require_identity` dependency turns any
       non-valid result into a 401 that names the reason.
Who:   POST /jwt and /logout set and clear the cookie; the "my ..." routes
       depend on `require_identity` and then `ensure_same_email`.

Verification outcomes:
    VALID              signature and expiry check out, identity has an email
    ABSENT             no cookie on the request
    EXPIRED            signature valid, `exp` in the past
    INVALID_SIGNATURE  signed with a different secret (or tampered)
    MALFORMED          not a JWT, missing required claims, or no email claim
"""

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request, Response

from foodcycle.config import Settings
from foodcycle.exceptions import AuthenticationError, AuthorizationError
from foodcycle.schemas.common import normalize_email

logger = logging.getLogger(__name__)


class TokenStatus(str, enum.Enum):
    VALID = "valid"
    ABSENT = "absent"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Identity:
    """The caller a valid token speaks for."""
    email: str
    claims: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TokenVerification:
    status: TokenStatus
    identity: Optional[Identity] = None

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID


class TokenService:
    """
    Signs identity claims into tokens and verifies them.

    Attributes:
        ttl:        validity window applied to every issued token
        algorithm:  HS256; verification accepts nothing else
    """

    algorithm = "HS256"

    def __init__(self, secret: str, ttl: timedelta):
        self._secret = secret
        self.ttl = ttl

    def issue(self, claims: Dict[str, Any], now: Optional[datetime] = None) -> str:
        """
        Return a signed token for `claims` valid from `now` for `ttl`.

        `iat` and `exp` are always set here; values supplied in `claims` are
        overwritten.
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = issued_at
        payload["exp"] = issued_at + self.ttl
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> TokenVerification:
        """Check a raw cookie value. Never raises for a bad token."""
        if not token:
            return TokenVerification(TokenStatus.ABSENT)

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            return TokenVerification(TokenStatus.EXPIRED)
        except jwt.InvalidSignatureError:
            return TokenVerification(TokenStatus.INVALID_SIGNATURE)
        except jwt.InvalidTokenError:
            return TokenVerification(TokenStatus.MALFORMED)

        email = claims.get("email")
        if not isinstance(email, str) or not email:
            return TokenVerification(TokenStatus.MALFORMED)

        return TokenVerification(
            TokenStatus.VALID,
            Identity(email=normalize_email(email), claims=claims),
        )


# ── Cookie Helpers ────────────────────────────────────────────────────────

def _cookie_attributes(settings: Settings) -> Dict[str, Any]:
    return {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
        "path": "/",
    }


def set_token_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        settings.token_cookie_name,
        token,
        max_age=settings.token_ttl_seconds,
        **_cookie_attributes(settings),
    )


def clear_token_cookie(response: Response, settings: Settings) -> None:
    # Browsers only drop the cookie when the attributes match the ones it was set with
    response.delete_cookie(settings.token_cookie_name, **_cookie_attributes(settings))


# ── FastAPI Dependencies ──────────────────────────────────────────────────

def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def require_identity(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
) -> Identity:
    """
    Authenticate the request from its token cookie.

    Raises:
        AuthenticationError: token absent, expired, mis-signed or malformed (→ 401)
    """
    result = tokens.verify(request.cookies.get(settings.token_cookie_name))
    if not result.is_valid:
        logger.info("Rejected token on %s: %s", request.url.path, result.status.value)
        raise AuthenticationError(reason=result.status.value)
    return result.identity


def ensure_same_email(identity: Identity, email: Optional[str]) -> str:
    """
    Authorization check for per-user listings: the token's email must be the
    email being queried. Returns the normalized email.

    Raises:
        AuthorizationError: email missing or different from the token's (→ 403)
    """
    if email is None or identity.email != normalize_email(email):
        raise AuthorizationError(context={"token_email": identity.email})
    return identity.email
