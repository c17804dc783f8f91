from __future__ import annotations

from typing import Any, Mapping, Optional

from ..tap_object import convert_to_tap_object
from .request import Opts


class Create:
    @classmethod
    def create(cls, params: Optional[Mapping[str, Any]] = None, opts: Opts = None):
        """Create a new object from ``params``."""
        resp, opts = cls._static_request("post", cls.class_url(), params, opts)
        return convert_to_tap_object(resp.data, opts)
