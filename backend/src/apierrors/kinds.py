"""Error taxonomy shared by the classifier, router and shaper.

ErrorKind is the closed vocabulary every raised failure is reduced to.
Its value doubles as the display name that goes out in ``devMessage``,
so it must never carry anything derived from the raised exception.
"""

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    MALFORMED_BODY = "MalformedBody"
    VALIDATION_FAILED = "ValidationFailed"
    ARGUMENT_TYPE_MISMATCH = "ArgumentTypeMismatch"
    CONSTRAINT_VIOLATION = "ConstraintViolation"
    DATA_INTEGRITY_VIOLATION = "DataIntegrityViolation"
    ACCESS_DENIED = "AccessDenied"
    NOT_FOUND = "NotFound"
    INVALID_DATA_ACCESS = "InvalidDataAccess"
    GENERIC_DATA_ACCESS = "GenericDataAccess"
    UNSUPPORTED_MEDIA_TYPE = "UnsupportedMediaType"
    UNHANDLED = "Unhandled"

    @property
    def display_name(self) -> str:
        return self.value


class LogSeverity(StrEnum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class FieldError:
    """One failed constraint on one request field."""

    field: str
    message: str | None


@dataclass(frozen=True, slots=True)
class RaisedError:
    """A raised failure reduced to what the translation layer needs.

    ``cause`` is only ever handed to the logger. ``field_errors`` is
    populated for ``ValidationFailed`` and keeps the order the validation
    pass reported, duplicates included.
    """

    kind: ErrorKind
    message: str | None = None
    cause: BaseException | None = None
    field_errors: tuple[FieldError, ...] = ()
