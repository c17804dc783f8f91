"""
Webhook signature verification.

Tap signs each webhook with an HMAC-SHA256 of a string built from fields of
the payload.  The way that string is built depends on the event type and is
documented by Tap, so it is supplied by the caller as ``canonicalize``: a
callable turning the decoded payload into the string that was signed.

Example:
    ```python
    def canonicalize(data):
        return "".join(f"x_{key}{data[key]}" for key in ("id", "amount", "currency"))

    event = construct_event(request.body, request.headers["hashstring"], secret, canonicalize)
    ```
"""
from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any, Callable, Mapping, Optional

from .api_operations.request import Opts
from .models.errors import SignatureVerificationError
from .tap_object import convert_to_tap_object

Canonicalizer = Callable[[Mapping[str, Any]], str]


class WebhookSignature:
    @staticmethod
    def compute_signature(payload: str, secret: str) -> str:
        return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()

    @classmethod
    def verify_header(
        cls,
        payload: str,
        signature_header: Optional[str],
        secret: str,
        canonicalize: Canonicalizer,
    ) -> bool:
        """Check ``signature_header`` against the signature of ``payload``.

        Raises:
            SignatureVerificationError: The header is empty, the payload is
                not a JSON object or the signature does not match
        """
        if not signature_header:
            raise SignatureVerificationError(
                "No signatures found", signature_header, http_body=payload
            )

        data = _decode_payload(payload, signature_header)
        expected_sig = cls.compute_signature(canonicalize(data), secret)

        if not hmac.compare_digest(expected_sig, signature_header.strip()):
            raise SignatureVerificationError(
                "No signatures found matching the expected signature for payload",
                signature_header,
                http_body=payload,
            )
        return True


def _decode_payload(payload: str, signature_header: Optional[str]) -> Mapping[str, Any]:
    try:
        data = json.loads(payload)
    except ValueError as e:
        raise SignatureVerificationError(
            f"Invalid webhook payload: {e}", signature_header, http_body=payload
        ) from e
    if not isinstance(data, Mapping):
        raise SignatureVerificationError(
            "Invalid webhook payload: expected a JSON object", signature_header, http_body=payload
        )
    return data


def verify(
    payload: str,
    signature_header: Optional[str],
    secret: str,
    canonicalize: Canonicalizer,
) -> bool:
    """Whether ``signature_header`` is a valid signature of ``payload``."""
    try:
        return WebhookSignature.verify_header(payload, signature_header, secret, canonicalize)
    except SignatureVerificationError:
        return False


def construct_event(
    payload: str,
    signature_header: Optional[str],
    secret: str,
    canonicalize: Canonicalizer,
    opts: Opts = None,
) -> Any:
    """Verify a webhook and materialize its payload as a resource object."""
    WebhookSignature.verify_header(payload, signature_header, secret, canonicalize)
    return convert_to_tap_object(json.loads(payload), opts)


__all__ = ["Canonicalizer", "WebhookSignature", "construct_event", "verify"]
