"""API Layer — FastAPI routes, auth dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses

Design Decisions:
    - Thin routes: authorization checks + one repository call (or a small composition)
"""
