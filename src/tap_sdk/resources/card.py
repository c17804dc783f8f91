from __future__ import annotations

from ..api_operations.delete import Delete
from ..api_operations.list import List
from ..api_operations.save import Save
from ..api_resource import APIResource
from ..object_types import register_object_type


@register_object_type
class Card(Save, Delete, List, APIResource):
    OBJECT_NAME = "card"
