from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s [{tag}] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per file: 5MB x 5 backups.
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 5


def configure_logging(
    tag: str = "shared",
    level: str = "INFO",
    log_dir: Optional[str] = None,
    to_file: bool = True,
) -> None:
    """
    Console logging plus <tag>-combined.log / <tag>-error.log when to_file.

    Safe to call more than once; handlers are replaced, not stacked.
    """
    fmt = logging.Formatter(LOG_FORMAT.format(tag=tag.upper()), DATE_FORMAT)
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    if to_file and log_dir:
        os.makedirs(log_dir, exist_ok=True)

        combined = RotatingFileHandler(
            os.path.join(log_dir, f"{tag}-combined.log"),
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        combined.setFormatter(fmt)
        root.addHandler(combined)

        errors = RotatingFileHandler(
            os.path.join(log_dir, f"{tag}-error.log"),
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        errors.setLevel(logging.ERROR)
        errors.setFormatter(fmt)
        root.addHandler(errors)

    # discord.py is chatty at DEBUG (gateway payloads).
    if root.level < logging.INFO:
        logging.getLogger("discord.gateway").setLevel(logging.INFO)


__all__ = ["configure_logging"]
