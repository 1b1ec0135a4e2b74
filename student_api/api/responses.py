"""Response Encoder - wraps payloads in the {status, status_code, data} envelope.

Invariants:
    - Every envelope carries exactly the keys status, status_code, data
    - HTTP status always equals the envelope status_code
    - Body is fully serialized before the response object exists, so an
      encoding failure can still become a 500 instead of a half-written body
"""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic_core import PydanticSerializationError

from student_api.core.domain_types import ResponseStatus
from student_api.core.errors import EnvelopeEncodingError
from student_api.schemas.envelope import Envelope


def json_response(
    status: ResponseStatus, status_code: int, data: Any = None,
) -> JSONResponse:
    """Build a JSON envelope response.

    Raises:
        EnvelopeEncodingError: `data` is not JSON serializable.
    """
    envelope = Envelope(status=status, status_code=status_code, data=data)
    try:
        content = envelope.model_dump(mode="json")
        return JSONResponse(status_code=status_code, content=content)
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        raise EnvelopeEncodingError(str(exc)) from exc


def success(status_code: int, data: Any = None) -> JSONResponse:
    return json_response(ResponseStatus.SUCCESS, status_code, data)


def error(status_code: int, data: Any = None) -> JSONResponse:
    return json_response(ResponseStatus.ERROR, status_code, data)
