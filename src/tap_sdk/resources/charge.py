from __future__ import annotations

from ..api_operations.create import Create
from ..api_operations.post_list import PostList
from ..api_operations.save import Save
from ..api_resource import APIResource
from ..object_types import register_object_type

IN_PROGRESS_STATUSES = frozenset({"INITIATED", "IN_PROGRESS"})
FAILED_STATUSES = frozenset({"ABANDONED", "CANCELLED", "FAILED", "DECLINED", "RESTRICTED"})
ISSUE_STATUSES = frozenset({"VOID", "TIMEDOUT", "UNKNOWN"})
SUCCESS_STATUSES = frozenset({"CAPTURED"})


@register_object_type
class Charge(Create, PostList, Save, APIResource):
    """A payment.

    Example:
        ```python
        charge = Charge.create({
            "amount": 10,
            "currency": "KWD",
            "customer": {"first_name": "Ali", "email": "ali@example.com"},
            "source": {"id": "src_all"},
            "redirect": {"url": "https://example.com/return"},
        })
        if charge.in_progress:
            ...
        ```
    """

    OBJECT_NAME = "charge"

    @property
    def in_progress(self) -> bool:
        return self.get("status") in IN_PROGRESS_STATUSES

    @property
    def failed(self) -> bool:
        # Issue statuses count as failures too.
        status = self.get("status")
        return status in FAILED_STATUSES or status in ISSUE_STATUSES

    @property
    def success(self) -> bool:
        return self.get("status") in SUCCESS_STATUSES
