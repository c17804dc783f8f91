"""Decoded API response."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx


@dataclass
class TapResponse:
    """A successfully decoded response and the raw HTTP details behind it.

    Attributes:
        data: Decoded JSON body
        http_body: Raw body text
        http_headers: Response headers (case-insensitive)
        http_status: HTTP status code
    """

    data: Any
    http_body: str
    http_status: int
    http_headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def request_id(self):
        return self.http_headers.get("request-id") or self.http_headers.get("x-request-id")

    @classmethod
    def from_http_response(cls, response: httpx.Response) -> "TapResponse":
        """Decode an ``httpx.Response``.

        Raises:
            ValueError: The body is not valid JSON
        """
        body = response.text
        return cls(
            data=json.loads(body),
            http_body=body,
            http_status=response.status_code,
            http_headers=response.headers,
        )


__all__ = ["TapResponse"]
