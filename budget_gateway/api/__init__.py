"""API Layer: FastAPI routes, error handlers and request forwarding.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON bodies, errors included

Design Decisions:
    - Thin routes: validate, acquire the client, forward exactly one call
"""
