"""Exception handlers: the boundary between raised errors and HTTP responses.

ErrorTranslator resolves an exception to an ErrorKind, classifies it, logs
it at the classified severity and shapes the body. register_error_handlers
wires one translator into a FastAPI app.

Only the kind identifier reaches the client as ``devMessage``. Causes go
to the logger, never into the body.

Exceptions no handler claims are translated by UnhandledErrorMiddleware
(middleware.py), inside the request-ID scope, so the server never sees
them. The ``Exception`` handler registered here only backs that up for
failures raised outside it; Starlette re-raises after such a handler has
answered, so the server logs those a second time.
"""

import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Protocol

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from apierrors.classifier import Classification, classify
from apierrors.kinds import ErrorKind, FieldError, LogSeverity, RaisedError
from apierrors.logging import get_logger
from apierrors.routing import ErrorRouter, translates_http_status
from apierrors.shaping import shape_generic, shape_validation

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class ErrorLogger(Protocol):
    """The four levels the translator logs at. structlog's BoundLogger fits."""

    def debug(self, event: str, **kw: Any) -> Any: ...

    def info(self, event: str, **kw: Any) -> Any: ...

    def warning(self, event: str, **kw: Any) -> Any: ...

    def error(self, event: str, **kw: Any) -> Any: ...


@dataclass(frozen=True)
class TranslatedError:
    """What the dispatch layer sends back: status, headers, JSON-ready body."""

    status: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status, content=self.body, headers=self.headers or None)


def format_location(location: Any) -> str:
    """Turn a pydantic error location into a field name, e.g. ("body", "items", 0, "sku") -> "items.0.sku"."""
    if not isinstance(location, (tuple, list)):
        return str(location)
    parts = [str(part) for part in location if part not in _LOCATION_PREFIXES]
    if parts:
        return ".".join(parts)
    if not location:
        return "request"
    return str(location[0])


def validation_field_errors(exc: BaseException) -> tuple[FieldError, ...]:
    """Field errors from a RequestValidationError, in reported order."""
    if not isinstance(exc, RequestValidationError):
        return ()
    return tuple(
        FieldError(field=format_location(issue.get("loc", ())), message=issue.get("msg"))
        for issue in exc.errors()
    )


def error_message(exc: BaseException) -> str | None:
    """The client-safe message an exception carries, if any.

    SQLAlchemy wraps the driver error together with the SQL statement and its
    parameters; only the driver error is used.
    """
    if isinstance(exc, RequestValidationError):
        return "; ".join(str(issue.get("msg")) for issue in exc.errors() if issue.get("msg")) or None
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig) or None
    if isinstance(exc, StarletteHTTPException):
        return exc.detail if isinstance(exc.detail, str) else None
    message = getattr(exc, "message", None)
    if isinstance(message, str):
        return message or None
    return str(exc) or None


class ErrorTranslator:
    """Turns any exception into a TranslatedError. Never raises."""

    def __init__(
        self,
        router: ErrorRouter | None = None,
        logger: ErrorLogger | None = None,
        *,
        expose_unhandled_messages: bool = False,
    ) -> None:
        self.router = router or ErrorRouter.default()
        self.logger: ErrorLogger = logger or get_logger(__name__)
        self.expose_unhandled_messages = expose_unhandled_messages

    def describe(self, exc: BaseException) -> RaisedError:
        """Reduce ``exc`` to its kind, client message and field errors.

        The message of an UNHANDLED error is dropped unless
        ``expose_unhandled_messages`` is set.
        """
        kind = self.router.resolve(exc)
        if kind is ErrorKind.UNHANDLED and not self.expose_unhandled_messages:
            message = None
        else:
            message = error_message(exc)
        field_errors = validation_field_errors(exc) if kind is ErrorKind.VALIDATION_FAILED else ()
        return RaisedError(kind=kind, message=message, cause=exc, field_errors=field_errors)

    def translate(
        self,
        exc: BaseException,
        *,
        path: str | None = None,
        method: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> TranslatedError:
        """Classify, log and shape ``exc``.

        If describing the error fails, the failure is logged at ERROR and the
        error is answered as UNHANDLED.
        """
        try:
            raised = self.describe(exc)
        except Exception as describe_exc:
            self._best_effort(
                LogSeverity.ERROR,
                "error_translation_failed",
                error_type=type(exc).__name__,
                path=path,
                method=method,
                exc_info=describe_exc,
            )
            raised = RaisedError(kind=ErrorKind.UNHANDLED, cause=exc)
        classification = classify(raised.kind)

        self._log(classification, raised, path=path, method=method)

        if raised.kind is ErrorKind.VALIDATION_FAILED:
            body = shape_validation(raised.field_errors).model_dump(by_alias=True)
        else:
            body = shape_generic(classification.status, raised).model_dump(by_alias=True)
        return TranslatedError(
            status=int(classification.status), body=body, headers=dict(headers or {})
        )

    def log_passthrough(
        self, status_code: int, *, path: str | None = None, method: str | None = None
    ) -> None:
        """Record an HTTP error answered with the framework's default body (405, 401, ...)."""
        try:
            event = HTTPStatus(status_code).phrase.lower().replace(" ", "_")
        except ValueError:
            event = "http_error"
        self._best_effort(LogSeverity.INFO, event, status=status_code, path=path, method=method)

    def _log(
        self,
        classification: Classification,
        raised: RaisedError,
        *,
        path: str | None,
        method: str | None,
    ) -> None:
        """One record at the classified severity, plus the detail record if any."""
        event = classification.reason.lower().replace(" ", "_")
        try:
            fields: dict[str, Any] = {
                "status": int(classification.status),
                "kind": raised.kind.display_name,
                "error": error_message(raised.cause) if raised.cause is not None else raised.message,
                "path": path,
                "method": method,
            }
            if classification.with_cause:
                fields["exc_info"] = raised.cause
            self._emit(classification.severity, event, **fields)
            if classification.detail_severity is not None:
                self._emit(
                    classification.detail_severity,
                    f"{event}_detail",
                    status=fields["status"],
                    kind=fields["kind"],
                    exc_info=raised.cause,
                )
        except Exception as log_exc:
            _report_logging_failure(log_exc)

    def _best_effort(self, severity: LogSeverity, event: str, **fields: Any) -> None:
        try:
            self._emit(severity, event, **fields)
        except Exception as log_exc:
            _report_logging_failure(log_exc)

    def _emit(self, severity: LogSeverity, event: str, **fields: Any) -> None:
        getattr(self.logger, severity.value)(event, **fields)


def _report_logging_failure(log_exc: Exception) -> None:
    sys.stderr.write(f"error logging failed: {log_exc!r}\n")


def register_error_handlers(app: FastAPI, translator: ErrorTranslator) -> None:
    """Attach the translator to every routed exception type plus a catch-all.

    HTTP exceptions with a mapped status, or a status of 500 and up, are
    translated; other 4xx statuses are logged and keep FastAPI's default body.
    """

    async def translate_exception(request: Request, exc: Exception) -> Response:
        """Answer a routed exception with its translated error body."""
        return translator.translate(
            exc, path=request.url.path, method=request.method
        ).to_response()

    async def translate_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
        """Translate mapped and 5xx HTTP exceptions; pass the rest to FastAPI."""
        if not translates_http_status(exc.status_code):
            translator.log_passthrough(exc.status_code, path=request.url.path, method=request.method)
            return await http_exception_handler(request, exc)
        return translator.translate(
            exc, path=request.url.path, method=request.method, headers=exc.headers
        ).to_response()

    for exc_type in translator.router.handled_types():
        if issubclass(exc_type, StarletteHTTPException):
            continue
        app.add_exception_handler(exc_type, translate_exception)
    app.add_exception_handler(StarletteHTTPException, translate_http_exception)
    app.add_exception_handler(Exception, translate_exception)
