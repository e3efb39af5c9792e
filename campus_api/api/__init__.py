"""API Layer — FastAPI routes, request gates and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes delegate business rules to services/
"""
