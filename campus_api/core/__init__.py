"""Core — pure domain logic (no IO, no framework imports).

Invariants:
    - Core never imports from api/, services/ or infrastructure/
"""
