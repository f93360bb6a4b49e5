"""
FoodCycle Backend - Shared Schemas
==================================

What:  Envelopes and field types used by more than one route module.

Envelopes:
    Writes   → {"success": true, "message": "...", "data": {driver result}}
    Errors   → {"success": false, "error": "code", "message": "...", "details": {...}, "request_id": "..."}
    Reads return bare documents or arrays of documents.
"""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field, model_validator


def normalize_email(value: str) -> str:
    """Canonical form used for storage, filtering and identity comparison."""
    return value.strip().lower()


# Every email accepted from a client is validated and stored lower-cased
Email = Annotated[EmailStr, AfterValidator(normalize_email)]


def _reserved_keys(value: Any, prefix: str = "") -> List[str]:
    """
    Keys the store would not take literally, at any depth: `_id` at the top
    level, operator names starting with `$`, and dotted paths.
    """
    found: List[str] = []
    if isinstance(value, dict):
        for key, item in value.items():
            name = str(key)
            if (not prefix and name == "_id") or name.startswith("$") or "." in name:
                found.append(prefix + name)
            found.extend(_reserved_keys(item, prefix + name + "."))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            found.extend(_reserved_keys(item, f"{prefix}{index}."))
    return found


class DocumentBody(BaseModel):
    """
    Base for request bodies that become stored documents.

    Unknown fields are kept and stored verbatim. Keys the store reserves
    (`_id`, operator names starting with `$`) and dotted keys, which an
    update would apply as nested paths past the typed fields, are rejected
    at the boundary, nested documents included.
    """

    model_config = {"extra": "allow"}

    @model_validator(mode="before")
    @classmethod
    def reject_reserved_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            reserved = _reserved_keys(data)
            if reserved:
                raise ValueError(f"Reserved field names are not allowed: {reserved}")
        return data


class WriteResponse(BaseModel):
    """Returned by every insert, update and delete route."""
    success: bool = Field(default=True)
    message: str = Field(description="Human-readable outcome")
    data: Dict[str, Any] = Field(description="Driver result (insertedId, matchedCount, deletedCount, ...)")


class AuthResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """Standardized error envelope for all API errors."""
    success: bool = Field(default=False)
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float
