"""Pydantic Schemas - API boundary models.

Invariants:
    - Schemas validate shape only; no IO
"""
