"""Maps an ErrorKind to the HTTP status and log severity it is reported with.

Client-caused failures (400/404/409/415) log quietly. Access denials and
unhandled failures log at ERROR with the cause attached, since they are
either a security event or a defect.
"""

from dataclasses import dataclass
from http import HTTPStatus

from apierrors.kinds import ErrorKind, LogSeverity


@dataclass(frozen=True, slots=True)
class Classification:
    status: HTTPStatus
    severity: LogSeverity
    # Second, more verbose record carrying the full cause (400 tier only)
    detail_severity: LogSeverity | None = None
    with_cause: bool = False

    @property
    def reason(self) -> str:
        """Short log message, e.g. "Bad Request"."""
        return self.status.phrase


_BAD_REQUEST = Classification(
    HTTPStatus.BAD_REQUEST, LogSeverity.INFO, detail_severity=LogSeverity.DEBUG
)
_CONFLICT = Classification(HTTPStatus.CONFLICT, LogSeverity.WARN)
_UNHANDLED = Classification(
    HTTPStatus.INTERNAL_SERVER_ERROR, LogSeverity.ERROR, with_cause=True
)

CLASSIFICATION_TABLE: dict[ErrorKind, Classification] = {
    ErrorKind.MALFORMED_BODY: _BAD_REQUEST,
    ErrorKind.VALIDATION_FAILED: _BAD_REQUEST,
    ErrorKind.ARGUMENT_TYPE_MISMATCH: _BAD_REQUEST,
    ErrorKind.CONSTRAINT_VIOLATION: _BAD_REQUEST,
    ErrorKind.DATA_INTEGRITY_VIOLATION: _BAD_REQUEST,
    ErrorKind.ACCESS_DENIED: Classification(
        HTTPStatus.FORBIDDEN, LogSeverity.ERROR, with_cause=True
    ),
    ErrorKind.NOT_FOUND: Classification(HTTPStatus.NOT_FOUND, LogSeverity.WARN),
    ErrorKind.INVALID_DATA_ACCESS: _CONFLICT,
    ErrorKind.GENERIC_DATA_ACCESS: _CONFLICT,
    ErrorKind.UNSUPPORTED_MEDIA_TYPE: Classification(
        HTTPStatus.UNSUPPORTED_MEDIA_TYPE, LogSeverity.WARN
    ),
    ErrorKind.UNHANDLED: _UNHANDLED,
}


def coerce_kind(kind: object) -> ErrorKind:
    """Normalize anything that claims to be a kind; unknown values become UNHANDLED."""
    if isinstance(kind, ErrorKind):
        return kind
    if isinstance(kind, str):
        try:
            return ErrorKind(kind)
        except ValueError:
            return ErrorKind.UNHANDLED
    return ErrorKind.UNHANDLED


def classify(kind: ErrorKind | str) -> Classification:
    """Return the status and severity for ``kind``. Never raises."""
    return CLASSIFICATION_TABLE.get(coerce_kind(kind), _UNHANDLED)
