# tablefetch/notify.py
"""User-facing notifications.

Messages go to the ``summary`` logger (console + summary file) and are kept
in memory so callers and tests can see what the user was told.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

# message templates, keyed by kind
MESSAGES = {
    "fetch_progress": "Got {count} records",
    "total": "There are {count} files needed to be updated or created.",
    "batch_progress": "There are {count} files needed to be processed.",
    "complete": "All Finished.",
    "write_failed": "Failed to write file: {error}",
    "import_failed": "Failed to import fetch sources: Invalid JSON",
    "source_done": "{name} is done.",
}


@dataclass(slots=True, frozen=True)
class Notice:
    kind: str
    message: str


@dataclass
class Notifier:
    notices: List[Notice] = field(default_factory=list)
    logger_name: str = "summary"

    def notify(self, kind: str, **values: object) -> Notice:
        template = MESSAGES.get(kind, "{message}")
        notice = Notice(kind, template.format(**values))
        self.notices.append(notice)

        lg = logging.getLogger(self.logger_name)
        if kind.endswith("_failed"):
            lg.warning("⚠️ %s", notice.message)
        else:
            lg.info("📣 %s", notice.message)
        return notice

    def of_kind(self, kind: str) -> List[Notice]:
        return [n for n in self.notices if n.kind == kind]

    def clear(self) -> None:
        self.notices.clear()
