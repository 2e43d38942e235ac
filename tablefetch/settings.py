"""Persistence of the fetch-source list.

The settings blob is a JSON object ``{"fetchSources": [...]}``. Sources can
be exported to and imported from a pretty-printed JSON array; exports drop
the ``id`` so that every import gets fresh ids.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .exceptions import StorageError, ValidationError
from .models import FetchSource, generate_unique_id
from .notify import Notifier

log = logging.getLogger(__name__)

SettingsListener = Callable[[List[FetchSource]], None]


def default_sources() -> List[FetchSource]:
    return [
        FetchSource(
            name="Untitled",
            url="https://example.com",
            api_key="",
            path="",
            will_export=True,
        )
    ]


def _dump(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


class SettingsStore:
    """Load, mutate and save the fetch sources kept in one JSON file."""

    def __init__(self, path: Path | str, notifier: Optional[Notifier] = None):
        self.path = Path(path)
        self.notifier = notifier or Notifier()
        self.sources: List[FetchSource] = []
        self._listeners: List[SettingsListener] = []

    # ------------------------------------------------------------------ io
    def load(self) -> List[FetchSource]:
        """Read the settings file; fall back to the defaults when it does not exist."""
        if not self.path.exists():
            log.info("📄 No settings file at %s, using defaults", self.path)
            self.sources = default_sources()
        else:
            try:
                data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
            except json.JSONDecodeError as e:
                raise ValidationError(f"Settings file {self.path} is not valid JSON: {e}") from e
            except OSError as e:
                raise StorageError(f"Could not read settings: {e}", file_path=str(self.path)) from e

            raw_sources = data.get("fetchSources") if isinstance(data, dict) else None
            if raw_sources is None:
                raw_sources = [s.to_dict() for s in default_sources()]
            if not isinstance(raw_sources, list):
                raise ValidationError("'fetchSources' must be a list", field_name="fetchSources")
            self.sources = [FetchSource.from_dict(item) for item in raw_sources if isinstance(item, dict)]

        for source in self.sources:
            source.ensure_id()

        log.info("✅ Loaded %d fetch sources from %s", len(self.sources), self.path)
        return self.sources

    def save(self) -> None:
        blob = {"fetchSources": [s.to_dict() for s in self.sources]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(_dump(blob), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not save settings: {e}", file_path=str(self.path)) from e
        log.debug("💾 Saved %d fetch sources to %s", len(self.sources), self.path)

    # ------------------------------------------------------------------ listeners
    def on_change(self, listener: SettingsListener) -> None:
        self._listeners.append(listener)

    def _changed(self) -> None:
        self.save()
        for listener in self._listeners:
            listener(list(self.sources))

    # ------------------------------------------------------------------ lookup
    def get(self, key: str) -> Optional[FetchSource]:
        """Find a source by id, then by exact name."""
        for source in self.sources:
            if source.id == key:
                return source
        for source in self.sources:
            if source.name == key:
                return source
        return None

    def _require(self, source_id: str) -> FetchSource:
        source = self.get(source_id)
        if source is None:
            raise ValidationError(f"No fetch source named or with id '{source_id}'")
        return source

    # ------------------------------------------------------------------ mutate
    def generate_unique_id(self) -> str:
        return generate_unique_id()

    def add(self, source: Optional[FetchSource] = None) -> FetchSource:
        """Append *source* (a blank one by default) under a fresh id."""
        source = source or FetchSource()
        source.id = self.generate_unique_id()
        self.sources.append(source)
        self._changed()
        log.info("➕ Added fetch source %s", source.display_name)
        return source

    def update(self, source_id: str, **changes: Any) -> FetchSource:
        source = self._require(source_id)
        for key, value in changes.items():
            if key == "id" or not hasattr(source, key):
                raise ValidationError(f"Unknown fetch source setting: {key}", field_name=key)
            if value is not None:
                setattr(source, key, value)
        self._changed()
        return source

    def delete(self, source_id: str) -> FetchSource:
        source = self._require(source_id)
        self.sources.remove(source)
        self._changed()
        log.info("🗑️ Deleted fetch source %s", source.display_name)
        return source

    # ------------------------------------------------------------------ import/export
    def export_sources(self) -> str:
        """JSON array of the sources marked for export, without ids."""
        return _dump([s.to_dict(include_id=False) for s in self.sources if s.will_export])

    def export_source(self, source_id: str) -> str:
        """One source in the same array format, whatever its export flag."""
        return _dump([self._require(source_id).to_dict(include_id=False)])

    def import_sources(self, text: str) -> Optional[List[FetchSource]]:
        """Append the sources of a JSON array; ``None`` when nothing was imported."""
        if not text or not text.strip():
            return None

        try:
            items = json.loads(text)
            if not isinstance(items, list):
                raise ValueError("expected a JSON array of fetch sources")
            imported = [FetchSource.from_dict(item) for item in items]
        except (ValueError, AttributeError, TypeError) as e:
            self.notifier.notify("import_failed")
            log.error("Failed to import fetch sources: %s", e)
            return None

        for source in imported:
            source.ensure_id()

        if imported:
            self.sources.extend(imported)
            self._changed()
        log.info("📥 Imported %d fetch sources", len(imported))
        return imported

    def as_dicts(self) -> List[Dict[str, Any]]:
        return [s.to_dict() for s in self.sources]
