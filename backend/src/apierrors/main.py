from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from apierrors.config import Settings
from apierrors.config import settings as default_settings
from apierrors.handlers import ErrorTranslator, register_error_handlers
from apierrors.logging import get_logger
from apierrors.middleware import RequestIDMiddleware, UnhandledErrorMiddleware
from apierrors.routing import ErrorRouter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log the installed error routes on startup."""
    logger.info("error_routes_registered", routes=len(list(app.state.translator.router.handled_types())))
    yield


def create_app(
    settings: Settings | None = None,
    translator: ErrorTranslator | None = None,
) -> FastAPI:
    """Build the application with error translation installed.

    The router and translator are built here, once, and only read while
    serving requests. Pass a translator to inject a different logger or
    routing table.
    """
    settings = settings or default_settings
    translator = translator or ErrorTranslator(
        ErrorRouter.default(),
        get_logger("apierrors.errors"),
        expose_unhandled_messages=settings.expose_unhandled_messages,
    )

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.translator = translator
    app.state.settings = settings
    # Last added runs outermost: request ID, then unhandled-error translation
    app.add_middleware(UnhandledErrorMiddleware, translator=translator)
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    register_error_handlers(app, translator)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness check for load balancers and orchestrators."""
        return {"status": "ok"}

    return app


app = create_app()
