"""Tests for error types."""

from sensorperiod.errors import BadRequestError, FormatError, NotFoundError


def test_format_error_message():
    """Test FormatError message and attributes."""
    error = FormatError("[bad", "period must be enclosed in '[' and ']'")

    assert error.value == "[bad"
    assert error.reason == "period must be enclosed in '[' and ']'"
    assert str(error) == "period must be enclosed in '[' and ']': '[bad'"
    assert isinstance(error, ValueError)


def test_request_error_status_codes():
    """Test HTTP status codes of request errors."""
    assert BadRequestError("bad").status_code == 400
    assert NotFoundError("missing").status_code == 404


def test_request_error_to_dict():
    """Test rendering request errors as response bodies."""
    assert NotFoundError("Datastream does not exist").to_dict() == {
        "code": 404,
        "message": "Datastream does not exist",
    }
    assert BadRequestError("Invalid validTime", field="validTime").to_dict() == {
        "code": 400,
        "message": "Invalid validTime",
        "field": "validTime",
    }
