"""Domain Types - enums that replace bare strings across the codebase.

Invariants:
    - All valid states encoded as Enums - no raw string matching
    - str Enums serialize to JSON without custom encoders
"""

from enum import Enum


class Environment(str, Enum):
    """Deployment environment named by the `env` config field."""
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


class ResponseStatus(str, Enum):
    """Status tag carried in every response envelope."""
    SUCCESS = "success"
    ERROR = "error"


class LifecycleState(str, Enum):
    """Server lifecycle states.

    initializing -> serving -> draining -> stopped, with crash_stopped
    reachable from initializing or serving.
    """
    INITIALIZING = "initializing"
    SERVING = "serving"
    DRAINING = "draining"
    STOPPED = "stopped"
    CRASH_STOPPED = "crash_stopped"
