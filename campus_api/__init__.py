"""Campus Ambassador API — role-based campus engagement backend.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
