from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int = logging.INFO, *, log_file: Path | None = None) -> None:
    """
    Configure root logging for command-line runs.

    Library modules only create `logging.getLogger(__name__)` loggers and
    never configure handlers themselves.
    """

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            level=level,
            filename=str(log_file),
            filemode="w",
            format=LOG_FORMAT,
            datefmt=LOG_DATEFMT,
            force=True,
        )
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT, force=True)
