"""Student Schema - placeholder entity decoded from request bodies.

Invariants:
    - Every field is optional; the body only has to be a JSON object
    - Unknown keys are accepted and ignored
    - Never persisted or echoed back
"""

from pydantic import BaseModel, ConfigDict, Field


class Student(BaseModel):
    """Student payload accepted by /api/students."""
    model_config = ConfigDict(extra="allow")

    id: int | None = None
    name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=320)
    age: int | None = Field(None, ge=0)
