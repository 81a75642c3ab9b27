"""Result objects returned by the data-access layer.

Service functions never raise for expected failures. They return an
``ActionResult`` and the HTTP layer turns a failed one into an error
response with ``unwrap``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class ActionResult(Generic[T]):
    success: bool
    response: T | None = None
    error: str | None = None
    code: int | None = None


def ok(response: Any = None) -> ActionResult:
    return ActionResult(success=True, response=response)


def fail(error: str, code: int = status.HTTP_400_BAD_REQUEST) -> ActionResult:
    return ActionResult(success=False, error=error, code=code)


def unauthenticated() -> ActionResult:
    return fail("You must be logged in", status.HTTP_401_UNAUTHORIZED)


def forbidden(error: str) -> ActionResult:
    return fail(error, status.HTTP_403_FORBIDDEN)


def not_found(error: str) -> ActionResult:
    return fail(error, status.HTTP_404_NOT_FOUND)


def server_error(error: str) -> ActionResult:
    return fail(error, status.HTTP_500_INTERNAL_SERVER_ERROR)


REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def format_validation_error(exc: ValidationError | RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        if loc and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        location = ".".join(str(part) for part in loc)
        parts.append(f"{location} ({error.get('type')}): {error.get('msg')}")
    return "Invalid input: " + "; ".join(parts)


def validate_input(model: type[ModelT], data: ModelT | dict | None) -> ActionResult:
    if isinstance(data, model):
        return ok(data)
    try:
        return ok(model.model_validate(data or {}))
    except ValidationError as exc:
        logger.debug("Rejected %s input: %s", model.__name__, exc)
        return fail(format_validation_error(exc), status.HTTP_400_BAD_REQUEST)


def unwrap(result: ActionResult[T]) -> T:
    if not result.success:
        raise HTTPException(
            status_code=result.code or status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.error,
        )
    return result.response
