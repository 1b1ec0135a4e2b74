"""API Layer - FastAPI routes, response envelope and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints except the plain-text welcome return the JSON envelope
"""
