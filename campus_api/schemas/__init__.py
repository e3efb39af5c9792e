"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate at the system boundary (user input)
    - Wire names are camelCase aliases of snake_case attributes
"""
