"""Route Modules - one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter
    - Routes never contain decoding or encoding logic (delegate to core/ and responses)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
