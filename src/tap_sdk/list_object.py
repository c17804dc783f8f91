"""
Paginated collections returned by list calls.

Tap paginates with a cursor: the next page is requested with
``starting_after`` set to the id of the last object of the current page.

Example:
    ```python
    page = Refund.list({"limit": 25})

    for refund in page.auto_paging_iter():
        print(refund.id)
    ```
"""
from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional
from urllib.parse import quote_plus

from . import util
from .api_operations.request import Opts, Request
from .object_types import register_object_type
from .tap_object import TapObject, convert_to_tap_object


@register_object_type
class ListObject(Request, TapObject):
    """A page of objects plus what is needed to fetch the following pages.

    Attributes:
        filters: The list query that produced this page, without the cursor
    """

    OBJECT_NAME = "list"

    def __init__(self, id: Any = None, opts: Opts = None) -> None:
        super().__init__(id, opts)
        self._filters: dict[str, Any] = {}
        self._list_method = "get"
        self._list_path: Optional[str] = None

    @property
    def filters(self) -> dict[str, Any]:
        return self._filters

    @filters.setter
    def filters(self, value: Optional[Mapping[str, Any]]) -> None:
        self._filters = dict(value or {})

    @classmethod
    def empty_list(cls, opts: Opts = None) -> "ListObject":
        return cls.construct_from({"data": []}, opts)

    @classmethod
    def fetch(
        cls,
        method: str,
        path: str,
        filters: Optional[Mapping[str, Any]] = None,
        opts: Opts = None,
    ) -> "ListObject":
        """Request one page and remember how to request the following ones.

        Args:
            method: ``get`` for query-string filters, ``post`` for a JSON body
            path: Endpoint to query
            filters: List query
            opts: Call options

        Returns:
            The page
        """
        filters = dict(filters or {})
        resp, opts = cls._static_request(method, path, filters, opts)

        page = cls.construct_from(resp.data, opts)
        page.filters = {k: v for k, v in filters.items() if k != "starting_after"}
        page._list_method = method
        page._list_path = path
        return page

    def __getitem__(self, key: str) -> Any:
        if not isinstance(key, str):
            raise TypeError(
                f"You tried to access the {key!r} index, but ListObject types "
                "only support string keys. (HINT: List calls return an object "
                "with a 'data' (which is the data array). You likely want to "
                f"call .data[{key!r}])"
            )
        return super().__getitem__(key)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.get("data") or [])

    @property
    def is_empty(self) -> bool:
        return not self.get("data")

    def auto_paging_iter(self) -> Iterator[Any]:
        """Iterate over every object of this page and of all following pages.

        A page is only requested once every object of the previous page has
        been consumed.  Each call starts over from this page.
        """
        page = self
        while True:
            yield from page
            page = page.next_page()
            if page.is_empty:
                return

    def next_page(self, params: Optional[Mapping[str, Any]] = None, opts: Opts = None) -> "ListObject":
        """Fetch the page after this one.

        Without ``has_more`` no request is made and an empty page is returned.
        """
        opts = {**self._opts, **util.normalize_opts(opts)}
        data = self.get("data") or []
        if not self.get("has_more") or not data:
            return self.empty_list(opts)

        params = {**self.filters, "starting_after": data[-1].get("id"), **(params or {})}
        return self.list(params, opts)

    def resource_url(self) -> str:
        url = self.get("url")
        if not url:
            raise ValueError("List object does not contain a 'url' field.")
        return url

    def list(self, filters: Optional[Mapping[str, Any]] = None, opts: Opts = None) -> "ListObject":
        """Re-run the list call that produced this page with other filters."""
        opts = {**self._opts, **util.normalize_opts(opts)}
        return self.fetch(self._list_method, self._list_path or self.resource_url(), filters, opts)

    def retrieve(self, id: Any, opts: Opts = None) -> Any:
        id, retrieve_params = util.normalize_id(id)
        resp, opts = self._request(
            "get", f"{self.resource_url()}/{quote_plus(id)}", retrieve_params, opts
        )
        return convert_to_tap_object(resp.data, opts)

    def create(self, params: Optional[Mapping[str, Any]] = None, opts: Opts = None) -> Any:
        resp, opts = self._request("post", self.resource_url(), params, opts)
        return convert_to_tap_object(resp.data, opts)

    def __getstate__(self) -> dict[str, Any]:
        state = super().__getstate__()
        state["filters"] = self._filters
        state["list_route"] = (self._list_method, self._list_path)
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        super().__setstate__(state)
        self._filters = dict(state.get("filters") or {})
        self._list_method, self._list_path = state.get("list_route", ("get", None))


__all__ = ["ListObject"]
