"""
Tap Python SDK

Client library for the Tap payments API: a schema-flexible resource model
with change tracking, on top of an HTTP pipeline with retries, typed errors
and structured logging.
"""

from .client import ResponseCapture, TapClient
from .config import TapSettings, configure, get_settings, reset_settings
from .log import setup_logging
from .models.errors import (
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
from .api_resource import APIResource
from .list_object import ListObject
from .object_types import register_object_type
from .resources import Authorize, Card, Charge, Customer, Refund, Token
from .response import TapResponse
from .retry import RetryPolicy
from .tap_object import TapObject, convert_to_tap_object
from .webhook import WebhookSignature, construct_event, verify

__version__ = "0.1.0"

__all__ = [
    # Client
    "TapClient",
    "ResponseCapture",
    "TapResponse",
    "RetryPolicy",
    # Configuration
    "TapSettings",
    "configure",
    "get_settings",
    "reset_settings",
    "setup_logging",
    # Errors
    "TapError",
    "ErrorEnvelope",
    "APIError",
    "APIConnectionError",
    "AuthenticationError",
    "InvalidRequestError",
    "PermissionError",
    "RateLimitError",
    "SignatureVerificationError",
    # Object model
    "TapObject",
    "APIResource",
    "ListObject",
    "convert_to_tap_object",
    "register_object_type",
    # Resources
    "Authorize",
    "Card",
    "Charge",
    "Customer",
    "Refund",
    "Token",
    # Webhooks
    "WebhookSignature",
    "construct_event",
    "verify",
]
