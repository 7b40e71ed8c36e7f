"""Routing table from concrete exception types to ErrorKind.

Built once at startup. Lookup walks the exception's MRO, so the most
specific registered class wins regardless of registration order, and an
exception with no registered ancestor resolves to UNHANDLED.

An entry is either a fixed ErrorKind or a resolver that inspects the
exception (FastAPI raises RequestValidationError for malformed JSON, bad
path/query parameters and body validation alike).
"""

from collections.abc import Callable, Iterator
from typing import Any

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException

from apierrors.exceptions import (
    AccessDeniedError,
    ConflictError,
    ConstraintViolationError,
    DomainError,
    NotFoundError,
    UnsupportedMediaTypeError,
)
from apierrors.kinds import ErrorKind

Resolver = Callable[[BaseException], ErrorKind]
Route = ErrorKind | Resolver

# HTTP exceptions (unknown route, unreadable form body, explicit raises in
# handlers) that have a counterpart in the taxonomy. Statuses of 500 and up
# resolve to UNHANDLED; the remaining 4xx statuses keep the framework's
# default response.
HTTP_STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.MALFORMED_BODY,
    403: ErrorKind.ACCESS_DENIED,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.INVALID_DATA_ACCESS,
    415: ErrorKind.UNSUPPORTED_MEDIA_TYPE,
}


def request_validation_kind(exc: BaseException) -> ErrorKind:
    """Split FastAPI's RequestValidationError into the three 400 kinds."""
    errors: list[dict[str, Any]] = list(getattr(exc, "errors", lambda: [])())
    if any(error.get("type") == "json_invalid" for error in errors):
        return ErrorKind.MALFORMED_BODY
    if errors and not any(_in_body(error) for error in errors):
        return ErrorKind.ARGUMENT_TYPE_MISMATCH
    return ErrorKind.VALIDATION_FAILED


def translates_http_status(status_code: int) -> bool:
    """Whether an HTTP exception with this status gets the error body."""
    return status_code in HTTP_STATUS_KINDS or status_code >= 500


def http_exception_kind(exc: BaseException) -> ErrorKind:
    status_code = getattr(exc, "status_code", None)
    return HTTP_STATUS_KINDS.get(status_code, ErrorKind.UNHANDLED)  # type: ignore[arg-type]


def _in_body(error: dict[str, Any]) -> bool:
    loc = error.get("loc") or ()
    return bool(loc) and loc[0] == "body"


class ErrorRouter:
    """Maps exception classes to ErrorKind."""

    def __init__(self, routes: dict[type[BaseException], Route] | None = None) -> None:
        self._routes: dict[type[BaseException], Route] = dict(routes or {})

    def register(self, exc_type: type[BaseException], route: Route) -> None:
        """Route ``exc_type`` (and its subclasses) to a kind or resolver."""
        self._routes[exc_type] = route

    def resolve(self, exc: BaseException) -> ErrorKind:
        for cls in type(exc).__mro__:
            route = self._routes.get(cls)
            if route is None:
                continue
            if isinstance(route, ErrorKind):
                return route
            return route(exc)
        return ErrorKind.UNHANDLED

    def handled_types(self) -> Iterator[type[BaseException]]:
        """Registered exception classes, in registration order."""
        return iter(self._routes)

    @classmethod
    def default(cls) -> "ErrorRouter":
        """Routing for FastAPI, pydantic, SQLAlchemy and the domain exceptions."""
        return cls(
            {
                RequestValidationError: request_validation_kind,
                PydanticValidationError: ErrorKind.CONSTRAINT_VIOLATION,
                DomainError: ErrorKind.CONSTRAINT_VIOLATION,
                ConstraintViolationError: ErrorKind.CONSTRAINT_VIOLATION,
                AccessDeniedError: ErrorKind.ACCESS_DENIED,
                NotFoundError: ErrorKind.NOT_FOUND,
                ConflictError: ErrorKind.INVALID_DATA_ACCESS,
                UnsupportedMediaTypeError: ErrorKind.UNSUPPORTED_MEDIA_TYPE,
                sa_exc.IntegrityError: ErrorKind.DATA_INTEGRITY_VIOLATION,
                sa_exc.DataError: ErrorKind.DATA_INTEGRITY_VIOLATION,
                sa_exc.NoResultFound: ErrorKind.NOT_FOUND,
                sa_exc.InvalidRequestError: ErrorKind.INVALID_DATA_ACCESS,
                sa_exc.SQLAlchemyError: ErrorKind.GENERIC_DATA_ACCESS,
                StarletteHTTPException: http_exception_kind,
            }
        )
