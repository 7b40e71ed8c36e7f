"""Shared FastAPI dependencies.

Defined here (not in main.py) to avoid circular imports when routers
are registered in main.
"""

from typing import Annotated

from fastapi import Depends, Request

from apierrors.config import Settings, settings
from apierrors.exceptions import UnsupportedMediaTypeError


def get_settings(request: Request) -> Settings:
    """Settings the running app was built with, falling back to the environment."""
    return getattr(request.app.state, "settings", settings)


AppSettings = Annotated[Settings, Depends(get_settings)]


async def require_media_type(request: Request, app_settings: AppSettings) -> None:
    """Reject request bodies whose Content-Type is not accepted.

    Parameters after ``;`` (charset, boundary) are ignored. Requests without
    a body (no Content-Type, no or zero Content-Length, no Transfer-Encoding)
    are let through.
    """
    content_type = request.headers.get("content-type")
    has_body = (
        request.headers.get("content-length", "0") != "0"
        or "transfer-encoding" in request.headers
    )
    if content_type is None and not has_body:
        return
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    accepted = {value.lower() for value in app_settings.accepted_media_types}
    if media_type not in accepted:
        raise UnsupportedMediaTypeError(content_type)


MediaTypeChecked = Depends(require_media_type)
