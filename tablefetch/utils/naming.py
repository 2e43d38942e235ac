# tablefetch/utils/naming.py
"""Helpers that turn record titles into safe note file names."""

from __future__ import annotations

import re
from typing import Final

# characters the note tree cannot hold in a file name; full-width parens included
_ILLEGAL_FILENAME: Final = re.compile(r"[/|\\:'\"()（）{}<>.*]")


def convert_to_valid_file_name(name: str) -> str:
    """Replace every illegal character with ``-`` and trim surrounding whitespace.

    Examples:
        convert_to_valid_file_name("Hello/World:Test*") → "Hello-World-Test-"
        convert_to_valid_file_name("  Notes (draft) ") → "Notes -draft-"
    """
    return _ILLEGAL_FILENAME.sub("-", name).strip()


def join_note_path(*parts: str) -> str:
    """Join vault-relative parts with ``/``, skipping empty ones after the first."""
    head, *rest = parts
    return "/".join([head, *[p for p in rest if p]])
