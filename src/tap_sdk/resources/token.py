from __future__ import annotations

from ..api_resource import APIResource
from ..object_types import register_object_type


@register_object_type
class Token(APIResource):
    """A tokenized card.

    Tokens can only be retrieved here: creating one from raw card data
    requires PCI compliance.
    """

    OBJECT_NAME = "token"
