"""
FoodCycle Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for each error class the API reports.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers registered in main.py turn them into JSON error
       envelopes with the matching HTTP status code.
Who:   Raised by services, the auth layer and route handlers.

Exception Hierarchy:
    FoodCycleError (base)
    ├── ValidationError       → 400 Bad Request
    ├── AuthenticationError   → 401 Unauthorized (token absent, expired, invalid)
    ├── AuthorizationError    → 403 Forbidden (identity does not own the resource)
    ├── NotFoundError         → 404 Not Found
    ├── ConflictError         → 409 Conflict
    ├── DatabaseError         → 500 Internal Server Error
    └── DuplicateRouteError   (startup only; never reaches a client)
"""

from typing import Any, Dict, Optional


class FoodCycleError(Exception):
    """
    Base exception for all FoodCycle application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where a handler opts in)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(FoodCycleError):
    """
    Raised when client input passes schema parsing but is still unusable.

    When:  Malformed document identifier, update body with no fields.
    HTTP:  400 Bad Request

    Schema-level problems (missing fields, wrong types) are rejected earlier
    by FastAPI with its own 422 response.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(FoodCycleError):
    """
    Raised when a protected route is called without a usable token.

    HTTP:  401 Unauthorized

    `reason` is the verification outcome (absent, expired, invalid_signature,
    malformed) and is reported to the client so the frontend can tell an
    expired session from a missing one.
    """

    def __init__(
        self,
        reason: str = "absent",
        message: str = "unauthorized access",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = reason
        super().__init__(message=message, context=ctx)
        self.reason = reason


class AuthorizationError(FoodCycleError):
    """
    Raised when the authenticated identity may not access the requested data.

    When:  GET /my-foods or /my-requests with an email other than the token's.
    HTTP:  403 Forbidden
    """

    def __init__(
        self,
        message: str = "forbidden access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(FoodCycleError):
    """
    Raised when a requested document does not exist.

    When:  GET /available-foods/{id} with an identifier that matches nothing.
    HTTP:  404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(FoodCycleError):
    """
    Raised when a write would duplicate an existing record.

    When:  Subscribing an email that is already on the newsletter list.
    HTTP:  409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(FoodCycleError):
    """
    Raised when a document store operation fails.

    HTTP:  500 Internal Server Error

    The message names the failed operation ("Failed to fetch foods") and is
    what the client sees; driver details go to the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DuplicateRouteError(FoodCycleError):
    """
    Raised at startup when two handlers are registered for the same method and path.

    The second handler would otherwise never run, so the factory refuses to
    build the application.
    """

    def __init__(self, method: str, path: str):
        super().__init__(
            message=f"Duplicate route registration: {method} {path}",
            context={"method": method, "path": path},
        )
        self.method = method
        self.path = path
