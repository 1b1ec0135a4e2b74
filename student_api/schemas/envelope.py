"""Envelope Schema - the uniform {status, status_code, data} response wrapper."""

from typing import Any

from pydantic import BaseModel

from student_api.core.domain_types import ResponseStatus


class Envelope(BaseModel):
    """Response envelope - all three keys are always present."""
    status: ResponseStatus
    status_code: int
    data: Any = None
