"""Public re-exports so callers can simply ``from tablefetch.utils import ...``."""

from .http_session import create_session  # noqa: F401
from .naming import convert_to_valid_file_name, join_note_path  # noqa: F401
from .run_summary import Summary  # noqa: F401

__all__ = [
    "create_session",
    "convert_to_valid_file_name",
    "join_note_path",
    "Summary",
]
