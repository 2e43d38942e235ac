# tablefetch/pipeline.py
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, List, Optional

from .commands import CommandRegistry
from .config import GlobalConfig
from .exceptions import format_error_for_logging
from .materialize import MaterializeResult, NoteMaterializer
from .models import FetchSource, record_fields
from .notify import Notifier
from .providers import RecordProvider, get_provider_class
from .settings import SettingsStore
from .utils.run_summary import Summary

log = logging.getLogger(__name__)


class Pipeline:
    """End-to-end run for fetch sources: Fetch records → Write notes."""

    def __init__(
        self,
        settings_path: Optional[Path] = None,
        *,
        config: Optional[GlobalConfig] = None,
        summary: Optional[Summary] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.config = config or GlobalConfig()
        self.summary = summary or Summary()
        self.notifier = notifier or Notifier()

        self.settings = SettingsStore(
            settings_path or Path(self.config.paths.settings), notifier=self.notifier
        )
        self.settings.load()

        self.materializer = NoteMaterializer(
            self.config.paths.vault, self.config.materialize, self.notifier
        )

        self.registry = CommandRegistry(self._run_command)
        self.settings.on_change(self.registry.rebuild)
        self.registry.rebuild(self.settings.sources)

    def provider_for(self, source: FetchSource) -> RecordProvider:
        provider_cls = get_provider_class(source.url, self.config.fetch.default_provider)
        return provider_cls(source, self.config, notifier=self.notifier)

    def run_source(
        self, source: FetchSource, filter_value: Optional[int] = None
    ) -> Optional[MaterializeResult]:
        """Fetch one source and write its notes. Failures are logged, never raised."""
        lg_sum = logging.getLogger("summary")
        start_time = time.time()
        log.info("🚚 %s", source.display_name)

        try:
            with self.provider_for(source) as provider:
                records = provider.fetch_records(filter_value)
            notes = record_fields(records)
            log.debug("Fetched %d notes for %s", len(notes), source.display_name)

            result = self.materializer.materialize(notes, source.path)
        except Exception as exc:
            log.error(
                "❌ Fetch failed for %s: %s",
                source.display_name,
                format_error_for_logging(exc),
                exc_info=True,
            )
            self.summary.log_fetch("error")
            self.summary.log_error(source.display_name, str(exc))
            return None

        self.summary.log_fetch("done")
        self.summary.log_notes("created", result.created)
        self.summary.log_notes("updated", result.updated)
        self.summary.log_notes("hidden", result.hidden_written)
        self.summary.log_notes("failed", result.failed)
        if result.failed:
            self.summary.log_error(source.display_name, f"{result.failed} notes could not be written")

        lg_sum.info(
            "⏱️ %s finished in %.1fs (%d notes)",
            source.display_name,
            time.time() - start_time,
            result.total,
        )
        return result

    def _run_command(self, source: FetchSource, filter_value: Optional[int]) -> Optional[MaterializeResult]:
        result = self.run_source(source, filter_value)
        self.notifier.notify("source_done", name=source.display_name)
        return result

    def run(
        self, keys: Optional[Iterable[str]] = None, filter_value: Optional[int] = None
    ) -> List[Optional[MaterializeResult]]:
        """Run the commands for *keys* (names or ids), or every source when omitted."""
        if keys is None:
            keys = [command.source.ensure_id() for command in self.registry.commands]

        results: List[Optional[MaterializeResult]] = []
        for key in keys:
            if self.registry.find(key) is None:
                log.warning("🤷 Unknown fetch source, skipped: %s", key)
                self.summary.log_fetch("skip")
                continue
            results.append(self.registry.run(key, filter_value))
        return results
