from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib.parse import quote_plus

from ..tap_object import convert_to_tap_object
from .request import Opts


class Save:
    """Update objects, either by id or by saving local changes."""

    additive_object_params = frozenset({"metadata"})

    @classmethod
    def update(cls, id: str, params: Optional[Mapping[str, Any]] = None, opts: Opts = None):
        """Update the object ``id`` with ``params`` without retrieving it first."""
        params = dict(params or {})
        for key in params:
            if key in cls.protected_fields:
                raise ValueError(f"Cannot update protected field: {key}")

        resp, opts = cls._static_request("put", f"{cls.class_url()}/{quote_plus(id)}", params, opts)
        return convert_to_tap_object(resp.data, opts)

    def save(self, params: Optional[Mapping[str, Any]] = None, opts: Opts = None):
        """Send the local changes (plus ``params``) and refresh from the answer.

        An object without an id is created instead when its class supports it.
        """
        self.update_attributes(dict(params or {}))
        values = self.serialize_params()
        values.pop("id", None)

        if self.get("id") is None and hasattr(type(self), "create"):
            method, url = "post", self.class_url()
        else:
            method, url = "put", self.instance_url()

        resp, opts = self._request(method, url, values, opts)
        return self.refresh_from(resp.data, opts)
