"""Unit tests for the cause-chain log processor."""

import sys

from apierrors.logging import add_cause_chain


def _raise_chained() -> Exception:
    try:
        try:
            raise ConnectionError("server closed the connection")
        except ConnectionError as driver_exc:
            raise LookupError("row lookup failed") from driver_exc
    except LookupError as exc:
        return exc
    raise AssertionError("unreachable")


def test_explicit_cause_chain_outermost_first() -> None:
    exc = _raise_chained()
    event = add_cause_chain(None, "error", {"event": "internal_server_error", "exc_info": exc})
    assert event["cause_chain"] == [
        "LookupError: row lookup failed",
        "ConnectionError: server closed the connection",
    ]
    assert "exc_info" in event


def test_implicit_context_is_followed() -> None:
    try:
        try:
            {}["missing"]
        except KeyError:
            raise RuntimeError("while handling")
    except RuntimeError as exc:
        event = add_cause_chain(None, "error", {"exc_info": exc})
    assert event["cause_chain"] == ["RuntimeError: while handling", "KeyError: 'missing'"]


def test_suppressed_context_is_not_followed() -> None:
    try:
        try:
            {}["missing"]
        except KeyError:
            raise RuntimeError("clean") from None
    except RuntimeError as exc:
        event = add_cause_chain(None, "error", {"exc_info": exc})
    assert event["cause_chain"] == ["RuntimeError: clean"]


def test_exc_info_tuple_from_stdlib_records() -> None:
    try:
        raise ValueError("bad value")
    except ValueError:
        event = add_cause_chain(None, "error", {"exc_info": sys.exc_info()})
    assert event["cause_chain"] == ["ValueError: bad value"]


def test_records_without_exception_are_untouched() -> None:
    assert add_cause_chain(None, "warning", {"event": "not_found"}) == {"event": "not_found"}
    assert add_cause_chain(None, "error", {"exc_info": True}) == {"exc_info": True}
