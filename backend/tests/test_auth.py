"""
FoodCycle Backend - Auth Tests
==============================

What:  TokenService verification outcomes, cookie issuance/clearing, and the
       authentication/authorization checks on per-user routes.

What we test:
    ✅ each verification outcome (valid, absent, expired, invalid signature, malformed)
    ✅ POST /jwt sets an http-only cookie with environment-dependent attributes
    ✅ POST /logout expires the cookie
    ✅ 401 responses name the verification reason
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import ASGITransport, AsyncClient

from foodcycle.auth import Identity, TokenService, TokenStatus, ensure_same_email
from foodcycle.exceptions import AuthorizationError
from foodcycle.main import create_app

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"


def _cookie_value(set_cookie: str) -> str:
    return set_cookie.split(";", 1)[0].split("=", 1)[1]


class TestTokenService:

    def setup_method(self):
        self.tokens = TokenService(TEST_SECRET, timedelta(hours=5))

    def test_issued_token_verifies(self):
        token = self.tokens.issue({"email": "a@x.com", "name": "Asha"})

        result = self.tokens.verify(token)

        assert result.status is TokenStatus.VALID
        assert result.is_valid
        assert result.identity.email == "a@x.com"
        assert result.identity.claims["name"] == "Asha"

    def test_expiry_is_ttl_after_issue(self):
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        token = self.tokens.issue({"email": "a@x.com"}, now=issued_at)

        claims = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])

        assert claims["exp"] - claims["iat"] == 5 * 3600

    def test_absent(self):
        assert self.tokens.verify(None).status is TokenStatus.ABSENT
        assert self.tokens.verify("").status is TokenStatus.ABSENT

    def test_expired(self):
        token = self.tokens.issue(
            {"email": "a@x.com"}, now=datetime.now(timezone.utc) - timedelta(hours=6)
        )

        result = self.tokens.verify(token)

        assert result.status is TokenStatus.EXPIRED
        assert result.identity is None

    def test_wrong_secret(self):
        other = TokenService("another-secret-of-sufficient-length-98765", timedelta(hours=5))
        token = other.issue({"email": "a@x.com"})

        assert self.tokens.verify(token).status is TokenStatus.INVALID_SIGNATURE

    def test_garbage_is_malformed(self):
        assert self.tokens.verify("not.a.jwt").status is TokenStatus.MALFORMED

    def test_token_without_email_is_malformed(self):
        token = self.tokens.issue({"name": "Nobody"})

        assert self.tokens.verify(token).status is TokenStatus.MALFORMED

    def test_token_without_expiry_is_malformed(self):
        token = jwt.encode({"email": "a@x.com"}, TEST_SECRET, algorithm="HS256")

        assert self.tokens.verify(token).status is TokenStatus.MALFORMED


class TestEnsureSameEmail:

    def test_match_ignores_case(self):
        assert ensure_same_email(Identity(email="a@x.com"), " A@x.com") == "a@x.com"

    def test_mismatch_raises(self):
        with pytest.raises(AuthorizationError):
            ensure_same_email(Identity(email="a@x.com"), "b@x.com")

    def test_missing_email_raises(self):
        with pytest.raises(AuthorizationError):
            ensure_same_email(Identity(email="a@x.com"), None)


class TestTokenRoutes:

    @pytest.mark.asyncio
    async def test_jwt_sets_http_only_cookie(self, test_client, token_service):
        response = await test_client.post("/jwt", json={"email": "A@x.com"})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("token=")
        assert "HttpOnly" in set_cookie
        assert "SameSite=strict" in set_cookie
        assert "Secure" not in set_cookie
        result = token_service.verify(_cookie_value(set_cookie))
        assert result.identity.email == "a@x.com"

    @pytest.mark.asyncio
    async def test_jwt_requires_an_email(self, test_client):
        response = await test_client.post("/jwt", json={"name": "Asha"})

        assert response.status_code == 422
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_production_cookie_is_cross_site(self, settings, fake_db):
        production = settings.model_copy(update={"environment": "production"})
        app = create_app(settings=production, database=fake_db)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/jwt", json={"email": "a@x.com"})

        set_cookie = response.headers["set-cookie"]
        assert "Secure" in set_cookie
        assert "SameSite=none" in set_cookie

    @pytest.mark.asyncio
    async def test_logout_expires_cookie(self, test_client):
        response = await test_client.post("/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith('token="";') or set_cookie.startswith("token=;")
        assert "Max-Age=0" in set_cookie
        assert "HttpOnly" in set_cookie

    @pytest.mark.asyncio
    async def test_issued_cookie_opens_my_requests(self, test_client):
        issued = await test_client.post("/jwt", json={"email": "a@x.com"})
        token = _cookie_value(issued.headers["set-cookie"])
        test_client.cookies.clear()

        response = await test_client.get(
            "/my-requests", params={"email": "a@x.com"}, headers={"Cookie": f"token={token}"}
        )

        assert response.status_code == 200
        assert response.json() == []


class TestAuthenticationFailures:

    @pytest.mark.asyncio
    async def test_expired_cookie_reason(self, test_client, token_service):
        token = token_service.issue(
            {"email": "a@x.com"}, now=datetime.now(timezone.utc) - timedelta(days=1)
        )

        response = await test_client.get(
            "/my-foods", params={"email": "a@x.com"}, headers={"Cookie": f"token={token}"}
        )

        assert response.status_code == 401
        assert response.json()["details"] == {"reason": "expired"}

    @pytest.mark.asyncio
    async def test_forged_cookie_reason(self, test_client):
        forged = TokenService("attacker-controlled-secret-0123456789abcdef", timedelta(hours=5))
        token = forged.issue({"email": "a@x.com"})

        response = await test_client.get(
            "/my-requests", params={"email": "a@x.com"}, headers={"Cookie": f"token={token}"}
        )

        assert response.status_code == 401
        assert response.json()["details"] == {"reason": "invalid_signature"}
        assert response.json()["message"] == "unauthorized access"

    @pytest.mark.asyncio
    async def test_auth_checked_before_query(self, test_client):
        response = await test_client.get("/my-foods")

        assert response.status_code == 401
