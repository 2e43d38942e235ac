# tablefetch/providers/airtable.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

from .base import RecordProvider

log = logging.getLogger(__name__)

_AIRTABLE_URL: Final = re.compile(
    r"https?://airtable\.com/(app[^/]+)/(tbl[^/]+)(?:/(viw[^/?]+))?"
)


@dataclass(slots=True, frozen=True)
class AirtableIds:
    base_id: str = ""
    table_id: str = ""
    view_id: str = ""


class AirtableProvider(RecordProvider):
    """Records from an Airtable base (``https://airtable.com/app…/tbl…/viw…``)."""

    name = "airtable"
    api_url_root = "https://api.airtable.com/v0/"

    @classmethod
    def extract_ids(cls, url: str) -> AirtableIds:
        match = _AIRTABLE_URL.search(url or "")
        if not match:
            log.warning("⚠️ URL does not look like an Airtable view: %s", url)
            return AirtableIds()

        return AirtableIds(
            base_id=match.group(1) or "",
            table_id=match.group(2) or "",
            view_id=match.group(3) or "",
        )

    def make_api_url(self, ids: AirtableIds) -> str:
        return f"{self.api_url_root}{ids.base_id}/{ids.table_id}?view={ids.view_id}"
