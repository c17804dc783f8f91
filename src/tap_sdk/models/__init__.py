"""Typed models shared by the Tap SDK."""

from .base import TapModel
from .errors import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    ErrorEnvelope,
    InvalidRequestError,
    PermissionError,
    RateLimitError,
    SignatureVerificationError,
    TapError,
)

__all__ = [
    "TapModel",
    "ErrorEnvelope",
    "TapError",
    "APIError",
    "APIConnectionError",
    "AuthenticationError",
    "InvalidRequestError",
    "PermissionError",
    "RateLimitError",
    "SignatureVerificationError",
]
