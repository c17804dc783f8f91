"""Request plumbing shared by every API resource."""
from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from .. import util
from ..client import TapClient
from ..response import TapResponse

Opts = Union[str, Mapping[str, Any], None]


class Request:
    """Mixin sending requests with per-call opts layered over the object's opts."""

    @classmethod
    def _static_request(
        cls,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        opts: Opts = None,
    ) -> tuple[TapResponse, dict[str, Any]]:
        """Send a request and return the response with the opts worth keeping.

        ``opts`` may carry ``api_key``, ``api_base``, ``client`` (a
        ``TapClient``); any other key is sent as a header, e.g.
        ``tap_version`` as ``Tap-Version``.
        """
        opts = util.normalize_opts(opts)
        headers = dict(opts)
        api_key = headers.pop("api_key", None)
        api_base = headers.pop("api_base", None)
        client = headers.pop("client", None) or TapClient.active_client()

        resp, opts["api_key"] = client.execute_request(
            method,
            url,
            api_base=api_base,
            api_key=api_key,
            headers=headers,
            params=params,
        )

        return resp, {k: v for k, v in opts.items() if k in util.OPTS_PERSISTABLE}

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        opts: Opts = None,
    ) -> tuple[TapResponse, dict[str, Any]]:
        opts = {**self._opts, **util.normalize_opts(opts)}
        return self._static_request(method, url, params, opts)
