"""Base class for resources with their own API endpoint."""
from __future__ import annotations

from typing import Any
from urllib.parse import quote_plus

from .api_operations.request import Opts, Request
from .models.errors import InvalidRequestError
from .tap_object import TapObject


class APIResource(Request, TapObject):
    """A ``TapObject`` living at ``/v2/{OBJECT_NAME}s/{id}``."""

    @classmethod
    def class_url(cls) -> str:
        if cls is APIResource or not cls.OBJECT_NAME:
            raise NotImplementedError(
                "APIResource is an abstract class. You should perform "
                "actions on its subclasses (e.g. Charge, Customer)"
            )
        return f"/v2/{cls.OBJECT_NAME.lower().replace('.', '/')}s"

    def instance_url(self) -> str:
        id = self.get("id")
        if not id:
            raise InvalidRequestError(
                f"Could not determine which URL to request: {type(self).__name__} "
                f"instance has invalid ID: {id!r}",
                "id",
            )
        return f"{self.class_url()}/{quote_plus(str(id))}"

    def refresh(self) -> "APIResource":
        """Reload this object from the API."""
        resp, opts = self._request("get", self.instance_url(), self._retrieve_params)
        return self.refresh_from(resp.data, opts)

    @classmethod
    def retrieve(cls, id: Any, opts: Opts = None) -> "APIResource":
        """Fetch an object by id.

        ``id`` may also be a mapping holding ``id`` plus extra query params.
        """
        instance = cls(id, opts)
        instance.refresh()
        return instance


__all__ = ["APIResource"]
