"""
FoodCycle Backend - Application Package
=======================================

What: HTTP backend for the FoodCycle food-sharing web application.
How:  FastAPI routes over a MongoDB document store, with cookie-based JWT auth.

Layering:

    ┌─────────────────────────────────────┐
    │     Routes (HTTP + auth checks)     │
    ├─────────────────────────────────────┤
    │   Services (one store call each)    │
    ├─────────────────────────────────────┤
    │  Schemas & document helpers (data)  │
    ├─────────────────────────────────────┤
    │    Database (motor client, owned    │
    │    by the application instance)     │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
