"""Student API - minimal HTTP service with a JSON response envelope.

Invariants:
    - Package root has no import side effects beyond the version constant
"""

__version__ = "0.1.0"
