from __future__ import annotations

from typing import Any, Mapping, Optional

from ..list_object import ListObject
from .request import Opts


class PostList:
    """List objects by POSTing the filters as JSON to ``{class_url}/list``."""

    @classmethod
    def list(cls, filters: Optional[Mapping[str, Any]] = None, opts: Opts = None) -> ListObject:
        return ListObject.fetch("post", f"{cls.class_url()}/list", filters, opts)

    all = list
