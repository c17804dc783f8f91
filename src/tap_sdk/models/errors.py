"""Error models for Tap SDK."""
from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from .base import TapModel

if TYPE_CHECKING:
    from ..response import TapResponse


class ErrorEnvelope(TapModel):
    """The ``error`` object of a failed API response.

    Fields are taken as sent: any ``error`` object is classified by status,
    whatever the types of its values.
    """

    code: Any = None
    message: Any = None
    param: Any = None
    type: Any = None


class TapError(Exception):
    """Base exception for Tap SDK."""

    def __init__(
        self,
        message: Optional[str] = None,
        http_status: Optional[int] = None,
        http_body: Optional[str] = None,
        json_body: Optional[Any] = None,
        http_headers: Optional[Mapping[str, str]] = None,
        code: Union[str, int, None] = None,
    ):
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.http_body = http_body
        self.json_body = json_body
        self.http_headers = dict(http_headers or {})
        self.code = code
        self.error: Optional[ErrorEnvelope] = None
        self.response: Optional["TapResponse"] = None

    def __str__(self) -> str:
        status_string = "" if self.http_status is None else f"(Status {self.http_status}) "
        return f"{status_string}{self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"http_status={self.http_status!r}, code={self.code!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "http_status": self.http_status,
        }
        if self.error is not None:
            error["param"] = self.error.param
            error["type"] = self.error.type
        return {"error": error}


class AuthenticationError(TapError):
    """Missing, malformed or rejected API key."""


class APIConnectionError(TapError):
    """The API could not be reached (DNS, TLS, timeout, refused connection)."""


class APIError(TapError):
    """Server-side failure or a response that could not be understood."""


class InvalidRequestError(TapError):
    """The request was rejected; ``param`` names the offending field."""

    def __init__(
        self,
        message: Optional[str],
        param: Optional[str],
        http_status: Optional[int] = None,
        http_body: Optional[str] = None,
        json_body: Optional[Any] = None,
        http_headers: Optional[Mapping[str, str]] = None,
        code: Union[str, int, None] = None,
    ):
        super().__init__(
            message,
            http_status=http_status,
            http_body=http_body,
            json_body=json_body,
            http_headers=http_headers,
            code=code,
        )
        self.param = param


class PermissionError(TapError):
    """The API key is valid but not allowed to perform the request."""


class RateLimitError(TapError):
    """Too many requests hit the API too quickly."""


class SignatureVerificationError(TapError):
    """A webhook payload did not match its signature header."""

    def __init__(
        self,
        message: str,
        sig_header: Optional[str],
        http_body: Optional[str] = None,
    ):
        super().__init__(message, http_body=http_body)
        self.sig_header = sig_header


def general_api_error(http_status: Optional[int], http_body: Optional[str]) -> APIError:
    """Error for a response whose body cannot be used."""
    return APIError(
        f"Invalid response object from API: {http_body!r} "
        f"(HTTP response code was {http_status})",
        http_status=http_status,
        http_body=http_body,
    )


def error_from_response(
    http_status: int,
    http_body: Optional[str],
    http_headers: Optional[Mapping[str, str]] = None,
) -> TapError:
    """Classify a failed HTTP response into a typed error.

    The body must carry an ``error`` object; anything else becomes a
    generic ``APIError`` holding the raw status and body.

    Args:
        http_status: HTTP status code
        http_body: Raw response body
        http_headers: Response headers

    Returns:
        The error to raise
    """
    try:
        json_body = json.loads(http_body or "")
    except ValueError:
        return general_api_error(http_status, http_body)

    error_data = json_body.get("error") if isinstance(json_body, dict) else None
    envelope = ErrorEnvelope.parse_fragment(error_data)
    if envelope is None:
        return general_api_error(http_status, http_body)

    opts: dict[str, Any] = {
        "http_body": http_body,
        "http_headers": http_headers,
        "http_status": http_status,
        "json_body": json_body,
        "code": envelope.code,
    }

    error: TapError
    if http_status in (400, 404):
        error = InvalidRequestError(envelope.message, envelope.param, **opts)
    elif http_status == 401:
        error = AuthenticationError(envelope.message, **opts)
    elif http_status == 403:
        error = PermissionError(envelope.message, **opts)
    elif http_status == 429:
        error = RateLimitError(envelope.message, **opts)
    else:
        error = APIError(envelope.message, **opts)

    error.error = envelope
    return error


__all__ = [
    "ErrorEnvelope",
    "TapError",
    "APIError",
    "APIConnectionError",
    "AuthenticationError",
    "InvalidRequestError",
    "PermissionError",
    "RateLimitError",
    "SignatureVerificationError",
    "error_from_response",
    "general_api_error",
]
