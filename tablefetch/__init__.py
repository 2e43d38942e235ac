"""Pull table records from Airtable or Vika and keep them as note files."""

from pathlib import Path
from typing import Any, Optional

from .pipeline import Pipeline


def run(name: str, settings: str | Path = "data/settings.json", filter_value: Optional[int] = None, **kwargs: Any) -> None:
    """Run one fetch source by name or id (mainly for notebooks / interactive use)."""
    Pipeline(settings_path=Path(settings), **kwargs).run([name], filter_value)


__all__ = ["run", "Pipeline"]
