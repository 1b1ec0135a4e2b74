"""Body Decoding - classify raw request bytes into a Student or a typed error.

Invariants:
    - Every failure maps to a RequestBodyError subclass (never falls through)
    - Empty and whitespace-only bodies are EmptyBodyError
    - Only a JSON object can become a Student

Design Decisions:
    - Decode from the full body bytes rather than a stream: bodies are small and
      the caller needs the whole payload before choosing a status
"""

import json

from pydantic import ValidationError

from student_api.core.errors import (
    EmptyBodyError, ErrorContext, MalformedBodyError, SchemaMismatchError,
)
from student_api.schemas.student import Student


def decode_student(body: bytes) -> Student:
    """Decode a request body into a Student.

    Raises:
        EmptyBodyError: body has no non-whitespace content.
        MalformedBodyError: body is not UTF-8 JSON.
        SchemaMismatchError: body is JSON but not a valid student object.
    """
    if not body.strip():
        raise EmptyBodyError()

    try:
        payload = json.loads(body)
    except UnicodeDecodeError as exc:
        raise MalformedBodyError(f"invalid UTF-8 ({exc.reason})") from exc
    except json.JSONDecodeError as exc:
        raise MalformedBodyError(
            f"{exc.msg} at line {exc.lineno} column {exc.colno}",
        ) from exc

    if not isinstance(payload, dict):
        raise SchemaMismatchError(
            f"expected a JSON object, got {_json_type_name(payload)}",
        )

    try:
        return Student.model_validate(payload)
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        raise SchemaMismatchError(
            _format_validation_errors(errors),
            ErrorContext(debug_info={"errors": errors}),
        ) from exc


def _format_validation_errors(errors: list[dict]) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in errors
    )


def _json_type_name(value: object) -> str:
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "null"
