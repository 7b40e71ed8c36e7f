from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from apierrors.config import Settings
from apierrors.handlers import ErrorTranslator
from apierrors.main import create_app
from apierrors.routing import ErrorRouter
from tests.failing_routes import router as failing_router
from tests.recording import RecordingLogger


@pytest.fixture
def log() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def translator(log: RecordingLogger) -> ErrorTranslator:
    return ErrorTranslator(ErrorRouter.default(), log)


@pytest.fixture
def app(translator: ErrorTranslator) -> FastAPI:
    """App with the failing endpoints and a recording logger injected."""
    application = create_app(Settings(), translator)
    application.include_router(failing_router)
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    # Failures outside UnhandledErrorMiddleware are re-raised by Starlette after
    # its 500 response; keep the response instead of the exception.
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client
