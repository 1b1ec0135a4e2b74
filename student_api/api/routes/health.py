"""Welcome & Health - root greeting and liveness probe.

Invariants:
    - GET / returns the plain-text welcome (the only non-envelope response)
    - GET /api/health always returns 200 if the process is serving
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from student_api import __version__
from student_api.api.dependencies import get_settings
from student_api.api.responses import success
from student_api.config import Settings

router = APIRouter(tags=["health"])

WELCOME_MESSAGE = "Welcome to the Student API!"


@router.get("/", response_class=PlainTextResponse)
async def welcome():
    return WELCOME_MESSAGE


@router.get("/api/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Basic liveness probe."""
    return success(status.HTTP_200_OK, {
        "status": "healthy",
        "env": settings.env.value,
        "version": __version__,
    })
