# tablefetch/utils/logging_cfg.py
from __future__ import annotations

import logging
import logging.config
from datetime import datetime
from pathlib import Path


def configure_logging(
    level_on_console: str = "INFO", log_dir: Path | str = "logs", level: str = "INFO"
) -> None:
    """Initialise two log files + console summary output.

    *level* gates the ``tablefetch`` loggers; *level_on_console* only filters
    what reaches the terminal. Provider request traces always go to the debug file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    today = datetime.now().strftime("%Y%m%d")

    summary_file = log_dir / f"tablefetch-{today}.log"
    debug_file = log_dir / f"tablefetch-{today}-debug.log"

    cfg: dict = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "summary": {
                "format": "%(asctime)s  %(levelname)-7s  %(message)s",
                "datefmt": "%H:%M:%S",
            },
            "console_clean": {
                "format": "%(asctime)s  %(levelname)-7s  %(message)s",
                "datefmt": "%H:%M:%S",
            },
            "debug": {
                "format": (
                    "%(asctime)s  %(levelname)-7s  "
                    "[%(name)s:%(lineno)d]  %(message)s"
                ),
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level_on_console.upper(),
                "formatter": "console_clean",
            },
            "summary_file": {
                "class": "logging.FileHandler",
                "level": "INFO",
                "filename": str(summary_file),
                "encoding": "utf-8",
                "formatter": "summary",
            },
            "debug_file": {
                "class": "logging.FileHandler",
                "level": "DEBUG",
                "filename": str(debug_file),
                "encoding": "utf-8",
                "formatter": "debug",
            },
        },
        "loggers": {
            "summary": {
                "level": "INFO",
                "handlers": ["console", "summary_file"],
                "propagate": False,
            },
            "tablefetch.providers": {
                "level": "DEBUG",
                "handlers": ["summary_file", "debug_file"],
                "propagate": False,
            },
            "tablefetch": {
                "level": level.upper(),
                "handlers": ["console", "summary_file", "debug_file"],
                "propagate": False,
            },
        },
        "root": {
            "level": "DEBUG",
            "handlers": ["console", "debug_file"],
        },
    }
    logging.config.dictConfig(cfg)
    logging.getLogger("summary").info("🟢 Logging initialised → %s", log_dir)
