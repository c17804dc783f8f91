from __future__ import annotations

from typing import Any, Mapping, Optional

from ..list_object import ListObject
from .request import Opts


class List:
    """List objects with a GET and query-string filters."""

    @classmethod
    def list(cls, filters: Optional[Mapping[str, Any]] = None, opts: Opts = None) -> ListObject:
        return ListObject.fetch("get", cls.class_url(), filters, opts)

    all = list
