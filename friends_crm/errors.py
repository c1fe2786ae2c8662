"""Domain errors and the FastAPI handlers that turn them into responses."""

from __future__ import annotations

from typing import Any, Dict, List, Type, TypeVar

import pydantic
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)


class CrmError(Exception):
    """Base class for errors raised by the CRM operations."""


class ValidationError(CrmError):
    """Input failed validation; ``errors`` holds one entry per offending field."""

    def __init__(self, errors: List[Dict[str, str]]):
        super().__init__("; ".join(f"{e['field']}: {e['message']}" for e in errors))
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])


class NotAuthorized(CrmError):
    """The entity exists but belongs to another user."""

    def __init__(self, message: str = "Not authorized to access this resource"):
        super().__init__(message)
        self.message = message


class NotFound(CrmError):
    """No entity with the requested id exists."""

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.message = f"{resource} not found"


def field_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flattens pydantic error dicts into ``{"field", "message"}`` pairs."""
    result = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        result.append({"field": ".".join(loc) or "__root__", "message": error.get("msg", "Invalid value")})
    return result


def validate(schema: Type[SchemaT], data: Any) -> SchemaT:
    """
    Validates ``data`` against ``schema``.

    Instances of the schema pass through untouched; mappings are parsed.

    Raises:
        ValidationError: With one entry per invalid field.
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(field_errors(exc.errors())) from exc


async def validation_error_handler(_: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": exc.errors})


async def request_validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": field_errors(exc.errors())},
    )


async def not_authorized_handler(_: Request, exc: NotAuthorized) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": exc.message})


async def not_found_handler(_: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Installs the domain error handlers on ``app``."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(NotAuthorized, not_authorized_handler)
    app.add_exception_handler(NotFound, not_found_handler)
