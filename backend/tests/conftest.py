"""
FoodCycle Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Apps are built with create_app() around an in-memory FakeDatabase that
       implements the slice of the motor API the services use (find / sort /
       limit / to_list, find_one, insert_one, update_one, delete_one,
       create_index, command) and returns real pymongo result objects.

Fixtures (function-scoped):
    ├── settings:      Settings with a fixed signing secret
    ├── fake_db:       empty FakeDatabase
    ├── app:           FastAPI app wired to fake_db
    ├── test_client:   HTTPX AsyncClient over ASGITransport
    ├── token_service: the app's TokenService
    └── auth_headers:  builds a Cookie header carrying a valid token for an email
"""

import copy
import os
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set before any foodcycle import: foodcycle.main builds a module-level app
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["ACCESS_TOKEN_SECRET"] = "test-secret-not-used-in-production-0123456789"
os.environ["LOG_LEVEL"] = "WARNING"

from foodcycle.config import Settings  # noqa: E402
from foodcycle.main import create_app  # noqa: E402

TEST_SECRET = "test-secret-for-signing-session-tokens-0123456789"


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Document Store
# ══════════════════════════════════════════════════════════════════════════

_MISSING = object()


def _lookup(doc: Dict[str, Any], dotted: str) -> Any:
    value: Any = doc
    for part in dotted.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(_lookup(doc, key) == expected for key, expected in query.items())


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs
        self._limit = 0

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self._docs = sorted(
            self._docs,
            key=lambda d: _lookup(d, key),
            reverse=direction == DESCENDING,
        )
        return self

    def limit(self, n: int) -> "FakeCursor":
        self._limit = n
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        docs = self._docs[: self._limit] if self._limit else self._docs
        if length is not None:
            docs = docs[:length]
        return [copy.deepcopy(d) for d in docs]


class FakeCollection:
    def __init__(self):
        self.docs: List[Dict[str, Any]] = []
        self.unique_fields: set = set()

    def find(self, query: Optional[Dict[str, Any]] = None) -> FakeCursor:
        return FakeCursor([d for d in self.docs if _matches(d, query or {})])

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, document: Dict[str, Any]) -> InsertOneResult:
        for field in self.unique_fields:
            if any(d.get(field) == document.get(field) for d in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error: {field}", 11000)
        document.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(document))
        return InsertOneResult(document["_id"], True)

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]) -> UpdateResult:
        changes = update["$set"]
        for doc in self.docs:
            if _matches(doc, query):
                modified = any(doc.get(k, _MISSING) != v for k, v in changes.items())
                doc.update(copy.deepcopy(changes))
                return UpdateResult({"n": 1, "nModified": int(modified)}, True)
        return UpdateResult({"n": 0, "nModified": 0}, True)

    async def delete_one(self, query: Dict[str, Any]) -> DeleteResult:
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return DeleteResult({"n": 1}, True)
        return DeleteResult({"n": 0}, True)

    async def create_index(self, key: str, unique: bool = False) -> str:
        if unique:
            self.unique_fields.add(key)
        return f"{key}_1"


class FakeDatabase:
    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def command(self, name: str) -> Dict[str, Any]:
        return {"ok": 1.0}


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongodb_uri="mongodb://localhost:27017",
        access_token_secret=TEST_SECRET,
        log_level="WARNING",
    )


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def app(settings, fake_db):
    return create_app(settings=settings, database=fake_db)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_liveness(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def token_service(app):
    return app.state.token_service


@pytest.fixture
def auth_headers(token_service):
    """Return a factory: email → headers carrying that user's session cookie."""

    def _make(email: str) -> Dict[str, str]:
        return {"Cookie": f"token={token_service.issue({'email': email})}"}

    return _make


@pytest.fixture
def sample_food() -> Dict[str, Any]:
    return {
        "name": "Rice",
        "quantity": 10,
        "status": "Available",
        "donator": {"email": "a@x.com", "name": "Asha"},
        "pickupLocation": "Dhaka",
    }
