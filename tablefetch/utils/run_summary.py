# tablefetch/utils/run_summary.py
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class Summary:
    fetches: Counter = field(default_factory=Counter)
    notes: Counter = field(default_factory=Counter)
    errors: List[str] = field(default_factory=list)

    # ------------------------------------------------------------------ API
    def log_fetch(self, status: str) -> None:
        self.fetches[status] += 1

    def log_notes(self, status: str, count: int = 1) -> None:
        if count:
            self.notes[status] += count

    def log_error(self, src: str, msg: str) -> None:
        if len(self.errors) < 10:
            self.errors.append(f"{src}: {msg}")

    # ------------------------------------------------------------------ dump
    def dump(self) -> None:
        lg = logging.getLogger("summary")
        lg.info("📥 Fetch summary ▸ done=%d skip=%d error=%d total=%d",
                self.fetches["done"], self.fetches["skip"],
                self.fetches["error"], sum(self.fetches.values()))
        lg.info("📝 Note summary ▸ created=%d updated=%d hidden=%d failed=%d",
                self.notes["created"], self.notes["updated"],
                self.notes["hidden"], self.notes["failed"])

        if self.errors:
            lg.info("🚨 First errors:")
            for line in self.errors:
                lg.info("    • %s", line)
