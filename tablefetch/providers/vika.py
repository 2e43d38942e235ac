# tablefetch/providers/vika.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Final

from .base import RecordProvider

log = logging.getLogger(__name__)

_VIKA_URL: Final = re.compile(r"https?://vika\.cn/workbench/(dst[^/]+)/(viw[^/]+)")


@dataclass(slots=True, frozen=True)
class VikaIds:
    table_id: str = ""
    view_id: str = ""


class VikaProvider(RecordProvider):
    """Records from a Vika datasheet (``https://vika.cn/workbench/dst…/viw…``)."""

    name = "vika"
    api_url_root = "https://vika.cn/fusion/v1/datasheets/"

    @classmethod
    def extract_ids(cls, url: str) -> VikaIds:
        match = _VIKA_URL.search(url or "")
        if not match:
            log.warning("⚠️ URL does not look like a Vika view: %s", url)
            return VikaIds()

        return VikaIds(table_id=match.group(1) or "", view_id=match.group(2) or "")

    def make_api_url(self, ids: VikaIds) -> str:
        return f"{self.api_url_root}{ids.table_id}/records?fieldKey=name&viewId={ids.view_id}"

    def _unwrap(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        # Vika nests the page under "data" and flags failures with success=false
        if payload.get("success") is False:
            return {"error": payload.get("message") or payload.get("code")}
        return payload.get("data") or {}
