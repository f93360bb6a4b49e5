# Middleware package init
"""
FoodCycle Backend - Middleware Package
======================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → [CORS] → Route Handler

    Request ID runs first so the access log line and any error envelope
    produced further in carry the same correlation id.
"""
