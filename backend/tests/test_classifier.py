"""Unit tests for the ErrorKind -> (status, severity) table."""

import pytest

from apierrors.classifier import CLASSIFICATION_TABLE, classify, coerce_kind
from apierrors.kinds import ErrorKind, LogSeverity


@pytest.mark.parametrize(
    "kind, status",
    [
        (ErrorKind.MALFORMED_BODY, 400),
        (ErrorKind.VALIDATION_FAILED, 400),
        (ErrorKind.ARGUMENT_TYPE_MISMATCH, 400),
        (ErrorKind.CONSTRAINT_VIOLATION, 400),
        (ErrorKind.DATA_INTEGRITY_VIOLATION, 400),
        (ErrorKind.ACCESS_DENIED, 403),
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.INVALID_DATA_ACCESS, 409),
        (ErrorKind.GENERIC_DATA_ACCESS, 409),
        (ErrorKind.UNSUPPORTED_MEDIA_TYPE, 415),
        (ErrorKind.UNHANDLED, 500),
    ],
)
def test_status_per_kind(kind: ErrorKind, status: int) -> None:
    assert classify(kind).status == status


def test_every_kind_has_a_row() -> None:
    assert set(CLASSIFICATION_TABLE) == set(ErrorKind)


@pytest.mark.parametrize("unknown", ["RateLimited", "", "notfound", None, 404, object()])
def test_unknown_kinds_fall_into_unhandled(unknown: object) -> None:
    result = classify(unknown)  # type: ignore[arg-type]
    assert result.status == 500
    assert result.severity is LogSeverity.ERROR
    assert result.with_cause


def test_display_name_strings_are_accepted() -> None:
    assert classify("NotFound").status == 404
    assert coerce_kind("AccessDenied") is ErrorKind.ACCESS_DENIED


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_client_errors_log_quietly_and_the_rest_loudly(kind: ErrorKind) -> None:
    result = classify(kind)
    if result.status in (403, 500):
        assert result.severity is LogSeverity.ERROR
        assert result.with_cause
    else:
        assert result.severity in (LogSeverity.INFO, LogSeverity.WARN, LogSeverity.DEBUG)
        assert not result.with_cause


def test_bad_request_tier_adds_debug_detail() -> None:
    result = classify(ErrorKind.DATA_INTEGRITY_VIOLATION)
    assert result.severity is LogSeverity.INFO
    assert result.detail_severity is LogSeverity.DEBUG
    assert classify(ErrorKind.NOT_FOUND).detail_severity is None


def test_reason_phrase() -> None:
    assert classify(ErrorKind.UNSUPPORTED_MEDIA_TYPE).reason == "Unsupported Media Type"
    assert classify(ErrorKind.UNHANDLED).reason == "Internal Server Error"
