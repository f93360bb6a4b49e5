"""
FoodCycle Backend - Document Helpers
====================================

What:  Conversions between MongoDB documents/driver results and JSON payloads.
How:   Identifiers are parsed at the HTTP boundary into ObjectId; documents and
       write results are turned into JSON-safe dicts before leaving a service.

Stored shapes (loosely typed, no enforced schema):

    foods                  {_id, status, quantity, donator: {email, ...}, ...}
    myRequests             {_id, userEmail, ...}
    newsletterSubscribers  {_id, email, subscribedAt}
"""

from datetime import datetime
from typing import Any, Dict, Mapping

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from foodcycle.exceptions import ValidationError


# ── Food status values written by the frontend ───────────────────────────
STATUS_AVAILABLE = "Available"
STATUS_REQUESTED = "Requested"

FEATURED_LIMIT = 6


def parse_object_id(value: str, field: str = "id") -> ObjectId:
    """
    Parse a path parameter into an ObjectId.

    Raises:
        ValidationError: value is not a 24-character hex identifier (→ 400)
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(
            message=f"'{value}' is not a valid identifier",
            field=field,
        )


def _to_json_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {k: _to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    return value


def serialize_document(doc: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a JSON-safe copy of a stored document; `_id` stays under its own key."""
    return {key: _to_json_value(value) for key, value in doc.items()}


def serialize_write_result(result: Any) -> Dict[str, Any]:
    """
    Describe a driver write result the way the frontend reads it.

    Shapes:
        insert → {acknowledged, insertedId}
        update → {acknowledged, matchedCount, modifiedCount, upsertedId}
        delete → {acknowledged, deletedCount}
    """
    if isinstance(result, InsertOneResult):
        return {
            "acknowledged": result.acknowledged,
            "insertedId": _to_json_value(result.inserted_id),
        }
    if isinstance(result, UpdateResult):
        return {
            "acknowledged": result.acknowledged,
            "matchedCount": result.matched_count,
            "modifiedCount": result.modified_count,
            "upsertedId": _to_json_value(result.upserted_id),
        }
    if isinstance(result, DeleteResult):
        return {
            "acknowledged": result.acknowledged,
            "deletedCount": result.deleted_count,
        }
    raise TypeError(f"Unsupported write result: {type(result).__name__}")
