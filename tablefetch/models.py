"""Domain models: fetch sources, records and the recency filter options."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Dict, Final, List, Mapping, Optional

log: Final = logging.getLogger(__name__)

# Records are open-ended mappings; only a handful of fields are interpreted.
RecordFields = Dict[str, Any]

# Value of the "all" option; never turned into a filter formula.
ALL_SENTINEL: Final = 9999


def generate_unique_id() -> str:
    """Return ``fetch-source-{epoch ms}-{0..9999}``; unique best-effort only."""
    return f"fetch-source-{int(time.time() * 1000)}-{random.randint(0, 9999)}"


@dataclass(slots=True)
class FetchSource:
    """A named configuration pointing at one remote table/view plus target folder."""

    name: str = ""
    url: str = ""
    api_key: str = ""
    path: str = ""
    id: Optional[str] = None
    will_export: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FetchSource:
        """Build from the persisted (camelCase) form; missing keys use defaults."""
        return cls(
            name=str(data.get("name", "") or ""),
            url=str(data.get("url", "") or ""),
            api_key=str(data.get("apiKey", "") or ""),
            path=str(data.get("path", "") or ""),
            id=data.get("id") or None,
            will_export=bool(data.get("willExport", True)),
        )

    def to_dict(self, *, include_id: bool = True) -> Dict[str, Any]:
        """Persisted form. Exports leave out ``id`` so imports get fresh ones."""
        data: Dict[str, Any] = {
            "name": self.name,
            "url": self.url,
            "apiKey": self.api_key,
            "path": self.path,
            "willExport": self.will_export,
        }
        if include_id and self.id:
            data["id"] = self.id
        return data

    def ensure_id(self) -> str:
        if not self.id:
            self.id = generate_unique_id()
        return self.id

    @property
    def display_name(self) -> str:
        return self.name or "Unnamed Fetch Source"


@dataclass(slots=True, frozen=True)
class DateFilterOption:
    """One entry of the fixed recency-filter menu."""

    id: str
    name: str
    value: int

    @property
    def is_all(self) -> bool:
        return self.value == ALL_SENTINEL


DATE_FILTER_OPTIONS: Final[List[DateFilterOption]] = [
    DateFilterOption("day", "Notes updated today", 1),
    DateFilterOption("threeDays", "Notes updated in the past 3 days", 3),
    DateFilterOption("week", "Notes updated in the past week", 7),
    DateFilterOption("twoWeeks", "Notes updated in the past two weeks", 14),
    DateFilterOption("month", "Notes updated in the past month", 30),
    DateFilterOption("all", "All notes", ALL_SENTINEL),
]


def find_date_filter(key: str) -> Optional[DateFilterOption]:
    """Look an option up by id (``week``) or by its 1-based menu number (``3``)."""
    key = key.strip()
    for option in DATE_FILTER_OPTIONS:
        if option.id.lower() == key.lower():
            return option

    if key.isdigit():
        index = int(key) - 1
        if 0 <= index < len(DATE_FILTER_OPTIONS):
            return DATE_FILTER_OPTIONS[index]

    log.debug("No date filter option matches %r", key)
    return None


def record_fields(records: List[Mapping[str, Any]]) -> List[RecordFields]:
    """Pull the ``fields`` mapping out of each raw provider record."""
    return [dict(record.get("fields") or {}) for record in records if record]
