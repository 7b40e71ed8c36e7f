"""Error response schemas.

Two shapes go out on the wire:

    {"status": 404, "message": "...", "devMessage": "NotFound"}
    {"fieldErrors": [{"field": "price", "message": "..."}, ...]}

The validation shape has no status field; the status travels only as the
HTTP status code. Dump with ``by_alias=True`` to get the camelCase keys.
"""

from pydantic import BaseModel, ConfigDict, Field


class ApiError(BaseModel):
    """Single-error body with a client message and the error-kind identifier."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: int
    message: str
    dev_message: str = Field(alias="devMessage")


class FieldErrorEntry(BaseModel):
    """One failed field constraint. ``message`` may be null."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str | None


class ValidationError(BaseModel):
    """Per-field validation failures, in the order they were reported."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field_errors: list[FieldErrorEntry] = Field(default_factory=list, alias="fieldErrors")
