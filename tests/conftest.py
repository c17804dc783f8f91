"""
Pytest configuration and fixtures for Tap SDK tests.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx
import pytest

from tap_sdk import config
from tap_sdk.config import TapSettings

API_BASE = "https://api.tap.company"
API_KEY = "sk_test_XKokBfNWv6FIYuTMg5sLPjhJ"


@dataclass
class _MockEntry:
    method: str
    url: str
    response: Optional[httpx.Response] = None
    exception: Optional[Exception] = None


@dataclass
class RecordedRequest:
    method: str
    url: str
    params: Any = None
    content: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    @property
    def query(self) -> dict[str, str]:
        return dict(parse_qsl(urlsplit(self.url).query, keep_blank_values=True))

    def json(self) -> Any:
        return json.loads(self.content) if self.content else None


class _LocalHTTPXMock:
    """Minimal pytest-httpx-compatible mock that also records every request."""

    def __init__(self) -> None:
        self._entries: list[_MockEntry] = []
        self.requests: list[RecordedRequest] = []

    def add_response(
        self,
        *,
        url: str,
        method: str = "GET",
        status_code: int = 200,
        json: Any = None,
        content: bytes | None = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        if content is None and json is not None:
            content = json_dumps_bytes(json)
            response_headers = {"content-type": "application/json"}
            if headers:
                response_headers.update(headers)
        else:
            response_headers = headers or {}

        request = httpx.Request(method.upper(), url)
        response = httpx.Response(
            status_code=status_code,
            headers=response_headers,
            content=content or b"",
            request=request,
        )
        self._entries.append(
            _MockEntry(method=method.upper(), url=url, response=response)
        )

    def add_exception(
        self,
        exception: Exception,
        *,
        url: str,
        method: str = "GET",
    ) -> None:
        self._entries.append(
            _MockEntry(method=method.upper(), url=url, exception=exception)
        )

    @property
    def last_request(self) -> RecordedRequest:
        assert self.requests, "No request was sent"
        return self.requests[-1]

    def _pop_match(self, method: str, url: str) -> _MockEntry:
        normalized_method = method.upper()
        normalized_url = _normalize_url(url)
        for idx, entry in enumerate(self._entries):
            if entry.method == normalized_method and _normalize_url(entry.url) == normalized_url:
                return self._entries.pop(idx)
        raise AssertionError(
            f"No mocked response for {normalized_method} {url}. "
            f"Available: {[f'{e.method} {e.url}' for e in self._entries]}"
        )


def json_dumps_bytes(payload: Any) -> bytes:
    return json.dumps(payload, default=str).encode("utf-8")


def _append_query_params(url: str, params: Any) -> str:
    if not params:
        return url
    query = urlencode(params, doseq=True)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def _normalize_url(url: str) -> str:
    parts = urlsplit(url)
    normalized_query = urlencode(sorted(parse_qsl(parts.query, keep_blank_values=True)), doseq=True)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, normalized_query, parts.fragment))


@pytest.fixture
def httpx_mock(monkeypatch):
    """`httpx_mock` fixture patching the sync transport entry point."""
    mock = _LocalHTTPXMock()

    def _sync_request(self, method, url, params=None, content=None, headers=None, **kwargs):
        full_url = _append_query_params(str(url), params)
        mock.requests.append(
            RecordedRequest(
                method=method.upper(),
                url=full_url,
                params=params,
                content=content,
                headers=dict(headers or {}),
            )
        )
        match = mock._pop_match(method, full_url)
        if match.exception is not None:
            raise match.exception
        assert match.response is not None
        return match.response

    monkeypatch.setattr(httpx.Client, "request", _sync_request)
    return mock


@pytest.fixture(autouse=True)
def tap_settings(monkeypatch) -> TapSettings:
    """Deterministic settings for every test, independent of the environment."""
    settings = TapSettings(api_key=API_KEY, api_base=API_BASE, _env_file=None)
    monkeypatch.setattr(config, "_settings", settings)
    return settings


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record retry sleeps instead of sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr("tap_sdk.client.time.sleep", recorded.append)
    return recorded


@pytest.fixture
def api_key() -> str:
    return API_KEY


@pytest.fixture
def api_base() -> str:
    return API_BASE


# Mock response data
MOCK_RESPONSES = {
    "charge": {
        "id": "chg_TS02A5720231234Hx8B2905123",
        "object": "charge",
        "amount": 10,
        "currency": "KWD",
        "status": "INITIATED",
        "description": "Test charge",
        "metadata": {"udf1": "test 1", "udf2": "test 2"},
        "customer": {"first_name": "Ali", "email": "ali@example.com"},
    },
    "customer": {
        "id": "cus_TS01A1120231234Qb5K2905456",
        "object": "customer",
        "first_name": "Ali",
        "email": "ali@example.com",
        "metadata": {},
    },
    "refund": {
        "id": "re_TS03A0420231234Zb2d2905789",
        "object": "refund",
        "amount": 5,
        "currency": "KWD",
        "charge_id": "chg_TS02A5720231234Hx8B2905123",
        "status": "PENDING",
    },
    "error": {
        "error": {
            "code": "1108",
            "message": "Invalid amount",
            "param": "amount",
            "type": "invalid_request_error",
        }
    },
}


@pytest.fixture
def mock_responses() -> dict:
    """Return mock response data."""
    return MOCK_RESPONSES


@pytest.fixture
def list_payload():
    """Build a list page payload."""

    def _build(objects: list[dict], *, has_more: bool = False, url: str = "/v2/charges") -> dict:
        return {"object": "list", "url": url, "has_more": has_more, "data": objects}

    return _build
