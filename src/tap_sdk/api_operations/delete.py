from __future__ import annotations

from typing import Any, Mapping, Optional

from .request import Opts


class Delete:
    def delete(self, params: Optional[Mapping[str, Any]] = None, opts: Opts = None):
        """Delete this object; it is refreshed from the API's answer."""
        resp, opts = self._request("delete", self.instance_url(), params, opts)
        return self.refresh_from(resp.data, opts)
