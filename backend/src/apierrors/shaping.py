"""Builds the client-visible error body.

Pure functions: no logging, no I/O. The caller logs before shaping.
"""

from collections.abc import Iterable

from apierrors.kinds import FieldError, RaisedError
from apierrors.schemas.error import ApiError, FieldErrorEntry, ValidationError


def shape_generic(status: int, error: RaisedError) -> ApiError:
    """Build the single-error body.

    ``message`` is the error's own message, or the kind's display name when
    that is missing or empty. ``devMessage`` is always the display name.
    """
    kind_name = error.kind.display_name
    return ApiError(status=int(status), message=error.message or kind_name, dev_message=kind_name)


def shape_validation(field_errors: Iterable[FieldError]) -> ValidationError:
    """Build the per-field body, one entry per input in input order."""
    return ValidationError(
        field_errors=[FieldErrorEntry(field=fe.field, message=fe.message) for fe in field_errors]
    )
