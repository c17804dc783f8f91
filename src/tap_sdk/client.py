"""
Tap API client.

``TapClient`` performs authenticated HTTP calls against the Tap API, retries
transient failures, logs every attempt and turns failures into typed errors.
Resources use the *active* client: the innermost ``TapClient.request()``
block on the current call stack, or a per-thread default client.

Example usage:
    ```python
    import httpx
    from tap_sdk import Charge, TapClient

    client = TapClient(httpx.Client(proxy="http://proxy.local:3128"))

    with client.request() as capture:
        charge = Charge.retrieve("chg_TS02A5720231234Hx8B2905123")

    print(capture.last_response.http_status)
    ```
"""
from __future__ import annotations

import json
import ssl
import threading
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping, Optional
from urllib.parse import parse_qsl, urlsplit

import httpx

from . import util
from .config import TapSettings, get_settings
from .log import log_debug, log_error, log_info
from .models.errors import (
    APIConnectionError,
    AuthenticationError,
    TapError,
    error_from_response,
    general_api_error,
)
from .response import TapResponse
from .retry import RetryPolicy

USER_AGENT = "tap-sdk-python/0.1.0"

_active_client: ContextVar[Optional["TapClient"]] = ContextVar("tap_active_client", default=None)
_response_capture: ContextVar[Optional["ResponseCapture"]] = ContextVar(
    "tap_response_capture", default=None
)
_thread_state = threading.local()


def _caused_by(error: BaseException, kind: type[BaseException]) -> bool:
    """Whether ``kind`` appears anywhere in the cause or context chain of ``error``."""
    seen: set[int] = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        if isinstance(current, kind):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


@dataclass
class RequestLogContext:
    """What is known about one attempt, for logging only."""

    method: str
    path: str
    body: Optional[str] = None
    query_params: Optional[str] = None
    api_key: Optional[str] = field(default=None, repr=False)


@dataclass
class ResponseCapture:
    """Holds the last response seen inside a ``TapClient.request()`` block."""

    last_response: Optional[TapResponse] = None


class TapClient:
    """
    Tap API request executor.

    Args:
        http_client: Connection pool to send requests through. Defaults to a
            per-thread shared ``httpx.Client``.
        retry: Retry policy. Defaults to one built from the settings at call time.
    """

    def __init__(
        self,
        http_client: Optional[httpx.Client] = None,
        retry: Optional[RetryPolicy] = None,
    ):
        self._http_client = http_client or self.default_http_client()
        self._retry = retry

    @classmethod
    def active_client(cls) -> "TapClient":
        """The client bound by the innermost ``request()`` block, else the default."""
        return _active_client.get() or cls.default_client()

    @classmethod
    def default_client(cls) -> "TapClient":
        client = getattr(_thread_state, "default_client", None)
        if client is None or client._http_client.is_closed:
            client = cls(cls.default_http_client())
            _thread_state.default_client = client
        return client

    @staticmethod
    def default_http_client() -> httpx.Client:
        conn = getattr(_thread_state, "default_http_client", None)
        if conn is None or conn.is_closed:
            conn = httpx.Client(headers={"User-Agent": USER_AGENT})
            _thread_state.default_http_client = conn
        return conn

    @contextmanager
    def request(self) -> Iterator[ResponseCapture]:
        """Bind this client as the active one for the duration of the block.

        The previous binding is restored on exit, so blocks nest and never
        leak into other threads or tasks.
        """
        capture = ResponseCapture()
        client_token = _active_client.set(self)
        capture_token = _response_capture.set(capture)
        try:
            yield capture
        finally:
            _response_capture.reset(capture_token)
            _active_client.reset(client_token)

    def close(self) -> None:
        """Close the underlying connection pool."""
        if not self._http_client.is_closed:
            self._http_client.close()

    def __enter__(self) -> "TapClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def execute_request(
        self,
        method: str,
        path: str,
        api_base: Optional[str] = None,
        api_key: Optional[str] = None,
        headers: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> tuple[TapResponse, str]:
        """Send one logical API call, retrying transient failures.

        Args:
            method: HTTP method (get, post, put, delete, ...)
            path: Path relative to the API base, optionally with a query string
            api_base: API base override
            api_key: API key override
            headers: Extra headers; they win over the standard ones
            params: Query parameters for get/head/delete, JSON body otherwise

        Returns:
            The decoded response and the API key that was used

        Raises:
            AuthenticationError: No usable API key
            APIConnectionError: The API could not be reached
            TapError: The API answered with an error
        """
        settings = get_settings()
        api_base = api_base or settings.api_base
        api_key = api_key or settings.api_key
        self._check_api_key(api_key)

        params = util.objects_to_ids(params or {})
        method = method.lower()

        body: Optional[str] = None
        query_params: Optional[dict[str, Any]] = None
        if method in ("get", "head", "delete"):
            query_params = params
        else:
            body = json.dumps(params)

        parts = urlsplit(path)
        if parts.query:
            query_params = {**dict(parse_qsl(parts.query)), **(query_params or {})}
            path = parts.path

        url = f"{api_base.rstrip('/')}{path}"
        request_headers = {
            **self._request_headers(api_key, settings),
            **util.normalize_headers(headers or {}),
        }

        context = RequestLogContext(
            method=method,
            path=path,
            body=body,
            query_params=util.encode_parameters(query_params) if query_params else None,
            api_key=api_key,
        )

        def send() -> httpx.Response:
            return self._http_client.request(
                method.upper(),
                url,
                params=util.flatten_params(query_params) if query_params else None,
                content=body,
                headers=request_headers,
                timeout=httpx.Timeout(settings.read_timeout, connect=settings.open_timeout),
            )

        http_resp = self._execute_request_with_rescues(api_base, context, send)

        try:
            resp = TapResponse.from_http_response(http_resp)
        except ValueError:
            raise general_api_error(http_resp.status_code, http_resp.text) from None

        capture = _response_capture.get()
        if capture is not None:
            capture.last_response = resp
        return resp, api_key

    def _execute_request_with_rescues(
        self,
        api_base: str,
        context: RequestLogContext,
        send: Callable[[], httpx.Response],
    ) -> httpx.Response:
        policy = self._retry or RetryPolicy.from_settings(get_settings())
        num_retries = 0

        while True:
            request_start = time.monotonic()
            self._log_request(context, num_retries)

            try:
                http_resp = send()
            except httpx.RequestError as e:
                self._log_response_error(context, request_start, e)
                if policy.should_retry(e, num_retries):
                    num_retries += 1
                    time.sleep(policy.sleep_time(num_retries))
                    continue
                raise self._network_error(e, num_retries, api_base) from e

            self._log_response(context, request_start, http_resp.status_code, http_resp.text)

            if http_resp.status_code >= 400:
                if policy.should_retry(None, num_retries, status_code=http_resp.status_code):
                    num_retries += 1
                    time.sleep(policy.sleep_time(num_retries))
                    continue
                raise self._api_error(http_resp)

            return http_resp

    def _api_error(self, http_resp: httpx.Response) -> TapError:
        error = error_from_response(http_resp.status_code, http_resp.text, http_resp.headers)
        if error.error is not None:
            log_error(
                "Tap API error",
                status=http_resp.status_code,
                error_code=error.error.code,
                error_message=error.error.message,
                error_param=error.error.param,
                error_type=error.error.type,
            )
            error.response = TapResponse(
                data=error.json_body,
                http_body=http_resp.text,
                http_status=http_resp.status_code,
                http_headers=http_resp.headers,
            )
        return error

    def _network_error(
        self,
        e: httpx.RequestError,
        num_retries: int,
        api_base: str,
    ) -> APIConnectionError:
        log_error("Tap network error", error_message=str(e))

        if isinstance(e, httpx.TimeoutException):
            message = (
                f"Could not connect to Tap ({api_base}). "
                "Please check your internet connection and try again. "
                "If this problem persists, you should check Tap's service status."
            )
        elif isinstance(e, httpx.ConnectError) and _caused_by(e, ssl.SSLError):
            message = (
                "Could not establish a secure connection to Tap, you may "
                "need to upgrade your OpenSSL version. To check, try running "
                f"'openssl s_client -connect {urlsplit(api_base).hostname}:443' "
                "from the command line."
            )
        elif isinstance(e, httpx.ConnectError):
            message = (
                "Unexpected error communicating when trying to connect to Tap. "
                "You may be seeing this message because your DNS is not working. "
                f"To check, try running 'host {urlsplit(api_base).hostname}' "
                "from the command line."
            )
        else:
            message = (
                "Unexpected error communicating with Tap. "
                "If this problem persists, let us know at support@tap.company."
            )

        if num_retries > 0:
            message += f" Request was retried {num_retries} times."

        return APIConnectionError(f"{message}\n\n(Network error: {type(e).__name__}: {e})")

    @staticmethod
    def _check_api_key(api_key: Optional[str]) -> None:
        if not api_key:
            raise AuthenticationError(
                "No API key provided. "
                'Set your API key using "tap_sdk.configure(api_key=<API-KEY>)" '
                "or the TAP_API_KEY environment variable. "
                "You can generate API keys from the Tap dashboard."
            )
        if any(ch.isspace() for ch in api_key):
            raise AuthenticationError(
                "Your API key is invalid, as it contains whitespace. "
                "(HINT: You can double-check your API key from the Tap dashboard.)"
            )

    @staticmethod
    def _request_headers(api_key: str, settings: TapSettings) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if settings.tap_version:
            headers["Tap-Version"] = settings.tap_version
        return headers

    @staticmethod
    def _log_request(context: RequestLogContext, num_retries: int) -> None:
        log_info(
            "Request to Tap API",
            method=context.method,
            num_retries=num_retries,
            path=context.path,
        )
        log_debug("Request details", body=context.body, query_params=context.query_params)

    @staticmethod
    def _log_response(
        context: RequestLogContext,
        request_start: float,
        status: int,
        body: str,
    ) -> None:
        log_info(
            "Response from Tap API",
            elapsed=round(time.monotonic() - request_start, 3),
            method=context.method,
            path=context.path,
            status=status,
        )
        log_debug("Response details", body=body)

    @staticmethod
    def _log_response_error(
        context: RequestLogContext,
        request_start: float,
        e: BaseException,
    ) -> None:
        log_error(
            "Request error",
            elapsed=round(time.monotonic() - request_start, 3),
            error_message=str(e),
            method=context.method,
            path=context.path,
        )


__all__ = ["RequestLogContext", "ResponseCapture", "TapClient", "USER_AGENT"]
