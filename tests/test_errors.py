"""
Tests for error classification and error models
"""
import json

import pytest

from tap_sdk.models.errors import (
    APIError,
    AuthenticationError,
    ErrorEnvelope,
    InvalidRequestError,
    PermissionError,
    RateLimitError,
    TapError,
    error_from_response,
    general_api_error,
)


def _body(**error):
    return json.dumps({"error": error})


class TestErrorFromResponse:
    """Tests for error_from_response."""

    def test_non_string_param(self):
        """Should classify an error whose param is not a string."""
        error = error_from_response(400, json.dumps({"error": {"message": "bad", "param": 5, "code": "1"}}))

        assert isinstance(error, InvalidRequestError)
        assert error.param == 5
        assert error.code == "1"

    def test_non_string_message(self):
        """Should classify an error whose message is not a string."""
        error = error_from_response(404, json.dumps({"error": {"message": ["a", "b"], "param": "id"}}))

        assert isinstance(error, InvalidRequestError)
        assert error.message == ["a", "b"]
        assert "(Status 404)" in str(error)

    def test_structured_code(self):
        """Should classify an error whose code is an object."""
        error = error_from_response(401, json.dumps({"error": {"code": {"id": 7}, "message": "m"}}))

        assert type(error) is AuthenticationError
        assert error.code == {"id": 7}

    def test_not_found_carries_param(self):
        """Should build an InvalidRequestError with the param."""
        error = error_from_response(404, _body(message="not found", param="id"))

        assert isinstance(error, InvalidRequestError)
        assert error.param == "id"
        assert error.message == "not found"
        assert error.http_status == 404

    @pytest.mark.parametrize(
        "status,error_class",
        [
            (400, InvalidRequestError),
            (401, AuthenticationError),
            (403, PermissionError),
            (429, RateLimitError),
            (500, APIError),
            (418, APIError),
        ],
    )
    def test_classification(self, status, error_class):
        """Should map statuses to error kinds."""
        assert type(error_from_response(status, _body(message="m"))) is error_class

    def test_error_details(self):
        """Should carry code, headers, body and envelope."""
        body = _body(code="1108", message="Invalid amount", param="amount", type="invalid_request_error")

        error = error_from_response(400, body, {"Request-Id": "req_1"})

        assert error.code == "1108"
        assert error.http_body == body
        assert error.http_headers == {"Request-Id": "req_1"}
        assert error.json_body == json.loads(body)
        assert error.error == ErrorEnvelope(
            code="1108", message="Invalid amount", param="amount", type="invalid_request_error"
        )

    def test_undecodable_body(self):
        """Should fall back to a generic APIError with status and body."""
        error = error_from_response(500, "<html>Bad Gateway</html>")

        assert type(error) is APIError
        assert error.http_status == 500
        assert error.http_body == "<html>Bad Gateway</html>"
        assert "<html>Bad Gateway</html>" in error.message
        assert "500" in error.message

    @pytest.mark.parametrize(
        "body",
        [
            json.dumps({"message": "no envelope"}),
            json.dumps({"error": "Unauthorized"}),
            json.dumps(["error"]),
        ],
    )
    def test_unusable_envelope(self, body):
        """Should fall back to a generic APIError for unusable envelopes."""
        error = error_from_response(401, body)

        assert type(error) is APIError
        assert error.error is None


class TestTapError:
    """Tests for the error base class."""

    def test_str_with_status(self):
        """Should prefix the status when known."""
        assert str(TapError("boom", http_status=500)) == "(Status 500) boom"

    def test_str_without_status(self):
        """Should render only the message without a status."""
        assert str(TapError("boom")) == "boom"

    def test_to_dict(self):
        """Should convert to an error dictionary."""
        error = error_from_response(404, _body(code="2", message="gone", param="id", type="t"))

        assert error.to_dict() == {
            "error": {
                "code": "2",
                "message": "gone",
                "http_status": 404,
                "param": "id",
                "type": "t",
            }
        }

    def test_general_api_error(self):
        """Should describe the unusable response."""
        error = general_api_error(200, "oops")

        assert str(error) == (
            "(Status 200) Invalid response object from API: 'oops' (HTTP response code was 200)"
        )


class TestErrorEnvelope:
    """Tests for the error envelope model."""

    def test_parse_fragment(self):
        """Should validate envelopes and ignore unknown keys."""
        envelope = ErrorEnvelope.parse_fragment({"code": 1108, "message": "m", "extra": True})

        assert envelope.code == 1108
        assert envelope.to_dict() == {"code": 1108, "message": "m"}

    def test_parse_fragment_rejects(self):
        """Should return None for values that are not envelopes."""
        assert ErrorEnvelope.parse_fragment("Unauthorized") is None
        assert ErrorEnvelope.parse_fragment(["message"]) is None
        assert ErrorEnvelope.parse_fragment(None) is None
