"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from .config import LoggingConfig

LOG_FILENAME = "appointment_monitor.log"


def setup_logging(
    logging_cfg: LoggingConfig | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Configure console logging and, when a directory is set, a rotating file.

    Handlers go on the root logger unless another ``logger`` is given.
    """
    if logging_cfg is None:
        logging_cfg = LoggingConfig()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if logging_cfg.logs_dir is not None:
        logging_cfg.logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            logging_cfg.logs_dir / LOG_FILENAME,
            maxBytes=logging_cfg.max_bytes,
            backupCount=logging_cfg.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    target = logger or logging.getLogger()
    target.setLevel(logging_cfg.log_level.upper())
    target.handlers.clear()
    for handler in handlers:
        target.addHandler(handler)
