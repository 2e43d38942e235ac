"""Turn fetched records into note files under the vault directory.

Each record becomes ``{root}[/{SubFolder}]/{Title}.{Extension|md}``. Missing
notes are created; existing ones are overwritten. Records are handled in
fixed-size batches with a progress notice after each batch.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from .config import MaterializeConfig
from .notify import Notifier
from .utils.naming import convert_to_valid_file_name, join_note_path

log = logging.getLogger(__name__)

DEFAULT_EXTENSION = "md"


@dataclass
class MaterializeResult:
    created: int = 0
    updated: int = 0
    hidden_written: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.created + self.updated + self.hidden_written + self.failed


class NoteMaterializer:
    """Writes records as notes, resolving vault-relative paths against *vault_dir*."""

    def __init__(
        self,
        vault_dir: Path | str,
        config: Optional[MaterializeConfig] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.vault_dir = Path(vault_dir)
        self.config = config or MaterializeConfig()
        self.notifier = notifier or Notifier()

    # ------------------------------------------------------------------ paths
    def _resolve(self, vault_path: str) -> Path:
        return self.vault_dir / vault_path.lstrip("/")

    def note_path_for(self, note: Mapping[str, Any], root_path: str) -> tuple[str, str]:
        """Return ``(folder_path, note_path)`` as vault-relative strings."""
        valid_file_name = convert_to_valid_file_name(str(note.get("Title") or ""))
        folder_path = join_note_path(root_path, str(note.get("SubFolder") or ""))
        extension = note["Extension"] if "Extension" in note else DEFAULT_EXTENSION
        return folder_path, f"{folder_path}/{valid_file_name}.{extension}"

    def create_path_if_needed(self, folder_path: str) -> None:
        folder = self._resolve(folder_path)
        if not folder.exists():
            log.debug("📁 Creating folder %s", folder)
            folder.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------ write
    def write_note(self, note: Mapping[str, Any], root_path: str, result: MaterializeResult) -> None:
        """Create or overwrite the note for one record.

        Any failure (folder, name, encoding) is reported and counted; it never
        stops the sibling records.
        """
        folder_path, note_path = self.note_path_for(note, root_path)
        content = str(note.get("MD") or "")

        try:
            self.create_path_if_needed(folder_path)
            target = self._resolve(note_path)
            exists = target.exists()
        except (OSError, ValueError) as e:
            self._failed(note_path, e, result)
            return

        if not exists:
            self._write(target, content, note_path, result, "created")
        elif note_path.startswith("."):
            # hidden/config paths get a plain write; failures are only reported
            try:
                target.write_text(content, encoding="utf-8")
                result.hidden_written += 1
                log.debug("💾 Wrote hidden note %s", note_path)
            except (OSError, ValueError) as e:
                result.failed += 1
                self.notifier.notify("write_failed", error=e)
        else:
            if self._write(target, content, note_path, result, "updated"):
                time.sleep(self.config.settle_delay)

    def _failed(self, note_path: str, error: Exception, result: MaterializeResult) -> None:
        log.error("❌ Failed to write note %s: %s", note_path, error)
        result.failed += 1
        self.notifier.notify("write_failed", error=error)

    def _write(
        self,
        target: Path,
        content: str,
        note_path: str,
        result: MaterializeResult,
        status: str,
    ) -> bool:
        try:
            target.write_text(content, encoding="utf-8")
        except (OSError, ValueError) as e:
            self._failed(note_path, e, result)
            return False

        setattr(result, status, getattr(result, status) + 1)
        log.debug("💾 %s %s", status.capitalize(), note_path)
        return True

    # ------------------------------------------------------------------ batches
    def materialize(self, notes: Sequence[Mapping[str, Any]], root_path: str) -> MaterializeResult:
        """Write *notes* in provider order, ``batch_size`` at a time."""
        result = MaterializeResult()
        pending = list(notes)
        batch_size = self.config.batch_size

        self.notifier.notify("total", count=len(pending))

        while pending:
            batch, pending = pending[:batch_size], pending[batch_size:]
            for note in batch:
                self.write_note(note, root_path, result)
            self.notifier.notify("batch_progress", count=len(pending))

        self.notifier.notify("complete")
        log.info(
            "✅ %s: %d created, %d updated, %d hidden, %d failed",
            root_path or "/",
            result.created,
            result.updated,
            result.hidden_written,
            result.failed,
        )
        return result
