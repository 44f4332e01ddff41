from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import AppConfig


def setup_logging(config: AppConfig, verbose: bool = False) -> None:
    """Log to stderr and to ``logs/dir-watch-media.log`` under the data dir."""

    level = logging.DEBUG if verbose else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    log_file: Path = config.logs_dir / "dir-watch-media.log"
    try:
        config.ensure_data_dirs()
        file_handler = RotatingFileHandler(str(log_file), maxBytes=2_000_000, backupCount=3)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logging.getLogger(__name__).debug("File logging enabled at %s", log_file)
    except OSError as exc:
        logging.getLogger(__name__).warning("File logging unavailable (%s); using console only", exc)
