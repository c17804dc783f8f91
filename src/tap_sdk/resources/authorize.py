from __future__ import annotations

from ..api_operations.create import Create
from ..api_operations.delete import Delete
from ..api_operations.post_list import PostList
from ..api_operations.save import Save
from ..api_resource import APIResource
from ..object_types import register_object_type


@register_object_type
class Authorize(Create, Delete, Save, PostList, APIResource):
    """An amount held on a card, to be captured or voided later."""

    OBJECT_NAME = "authorize"
