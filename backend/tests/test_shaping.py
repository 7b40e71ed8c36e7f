"""Unit tests for the error body builders."""

import pytest

from apierrors.kinds import ErrorKind, FieldError, RaisedError
from apierrors.shaping import shape_generic, shape_validation


@pytest.mark.parametrize("message", [None, ""])
def test_missing_message_falls_back_to_kind_name(message: str | None) -> None:
    body = shape_generic(404, RaisedError(ErrorKind.NOT_FOUND, message))
    assert body.message == "NotFound"
    assert body.dev_message == "NotFound"


def test_message_is_passed_verbatim() -> None:
    body = shape_generic(404, RaisedError(ErrorKind.NOT_FOUND, "Item with id 7 not found"))
    assert body.model_dump(by_alias=True) == {
        "status": 404,
        "message": "Item with id 7 not found",
        "devMessage": "NotFound",
    }


def test_dev_message_is_never_the_raw_message() -> None:
    cause = ValueError("column secret_token is null")
    error = RaisedError(ErrorKind.CONSTRAINT_VIOLATION, str(cause), cause=cause)
    body = shape_generic(400, error)
    assert body.dev_message == "ConstraintViolation"
    assert body.dev_message != str(cause)


def test_validation_keeps_order_duplicates_and_null_messages() -> None:
    field_errors = [
        FieldError("email", "required"),
        FieldError("email", "invalid format"),
        FieldError("age", None),
    ]
    body = shape_validation(field_errors)
    assert body.model_dump(by_alias=True) == {
        "fieldErrors": [
            {"field": "email", "message": "required"},
            {"field": "email", "message": "invalid format"},
            {"field": "age", "message": None},
        ]
    }


def test_validation_with_no_field_errors() -> None:
    assert shape_validation([]).model_dump(by_alias=True) == {"fieldErrors": []}


def test_validation_accepts_any_iterable() -> None:
    body = shape_validation(FieldError(name, "bad") for name in ("b", "a"))
    assert [entry.field for entry in body.field_errors] == ["b", "a"]
