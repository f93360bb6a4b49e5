# Routes package init
"""
FoodCycle Backend - API Routes Package
======================================

Route Inventory:
    - auth.py:           POST /jwt, POST /logout
    - foods.py:          GET /available-foods, GET /available-foods/{id},
                         GET /featured-foods, GET /my-foods, POST /add-food,
                         PATCH /foods/{id}, PATCH /foods/{id}/status,
                         DELETE /foods/{id}
    - food_requests.py:  GET /my-requests, POST /my-requests
    - newsletter.py:     POST /newsletter-subscribe
    - health.py:         GET /, GET /health

Routes stay thin: parse input, run auth checks, call one service method.

Registration is checked before the routers are included: a second handler
for a (method, path) pair that already has one would never be reached, so
`ensure_unique_routes` refuses to start instead. The routers are checked
rather than the assembled app, whose route list may hold one opaque entry
per included router.
"""

from typing import Iterable, Set, Tuple

from fastapi import APIRouter

from foodcycle.exceptions import DuplicateRouteError


def ensure_unique_routes(routers: Iterable[APIRouter]) -> None:
    """
    Raise DuplicateRouteError if any (method, path) pair is registered twice
    across `routers`. Each router's own prefix is already part of its paths.

    Routes without methods (mounts, websockets) are not checked.
    """
    seen: Set[Tuple[str, str]] = set()
    for route in (r for router in routers for r in router.routes):
        methods = getattr(route, "methods", None)
        path = getattr(route, "path", None)
        if not methods or path is None:
            continue
        for method in sorted(methods):
            key = (method, path)
            if key in seen:
                raise DuplicateRouteError(method=method, path=path)
            seen.add(key)
