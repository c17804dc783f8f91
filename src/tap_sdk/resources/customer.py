from __future__ import annotations

from typing import Any, Mapping, Optional

from .. import util
from ..api_operations.create import Create
from ..api_operations.delete import Delete
from ..api_operations.post_list import PostList
from ..api_operations.request import Opts
from ..api_operations.save import Save
from ..api_resource import APIResource
from ..list_object import ListObject
from ..object_types import register_object_type
from .charge import Charge


@register_object_type
class Customer(Create, Delete, Save, PostList, APIResource):
    OBJECT_NAME = "customer"

    def charges(self, params: Optional[Mapping[str, Any]] = None, opts: Opts = None) -> ListObject:
        """List this customer's charges."""
        opts = {**self._opts, **util.normalize_opts(opts)}
        return Charge.list({**(params or {}), "customers": [self.id]}, opts)
