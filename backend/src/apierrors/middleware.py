"""FastAPI middleware for request tracing and last-resort error translation.

Error records logged by the exception handlers carry the request_id bound
here, which ties a client-visible error back to its log lines.
"""

import uuid
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

if TYPE_CHECKING:
    from apierrors.handlers import ErrorTranslator

DEFAULT_REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add request ID to every request for tracing.

    - Reads the request ID header, or generates a UUID if missing
    - Binds request_id to structlog context (auto-included in all logs)
    - Echoes the request ID on the response

    Usage:
        app.add_middleware(RequestIDMiddleware, header_name="X-Request-ID")
    """

    def __init__(self, app: ASGIApp, header_name: str = DEFAULT_REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers[self.header_name] = request_id

        return response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Translate exceptions that no exception handler claimed.

    Add it before RequestIDMiddleware so it runs inside the request-ID scope:
    500 responses then carry the request ID header, and the exception stops
    here instead of reaching the server's own traceback logging.

    Usage:
        app.add_middleware(UnhandledErrorMiddleware, translator=translator)
        app.add_middleware(RequestIDMiddleware)
    """

    def __init__(self, app: ASGIApp, translator: "ErrorTranslator") -> None:
        super().__init__(app)
        self.translator = translator

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return self.translator.translate(
                exc, path=request.url.path, method=request.method
            ).to_response()
