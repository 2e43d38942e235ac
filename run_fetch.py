# run_fetch.py
from __future__ import annotations

import sys

from tablefetch.cli import main

# ---------------------------------------------------------------------------
# CLI entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main())
