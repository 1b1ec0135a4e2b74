"""Students - placeholder student-creation endpoint.

Invariants:
    - Exactly one status and one body per request
    - Any undecodable body is a 400 envelope (empty, malformed, wrong shape)
    - The decoded Student is discarded; nothing is stored

Design Decisions:
    - Body read in full and decoded before any response is chosen
    - GET and POST share one handler; both carry the student in the body
"""

import logging

from fastapi import APIRouter, Request, status

from student_api.api.responses import success
from student_api.core.decode_body import decode_student

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/students", tags=["students"])

STUDENT_CREATED = {"success": "Student created successfully"}


@router.api_route(
    "", methods=["GET", "POST"], status_code=status.HTTP_201_CREATED,
)
async def create_student(request: Request):
    """Decode a student from the body and acknowledge it."""
    decode_student(await request.body())

    logger.info(
        "Received request",
        extra={"method": request.method, "path": request.url.path},
    )
    return success(status.HTTP_201_CREATED, STUDENT_CREATED)
