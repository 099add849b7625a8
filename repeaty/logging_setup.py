"""Настройка логирования: файл рядом с программой и stderr."""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler

from repeaty.config import LoggingConfig
from repeaty.services.output_naming import executable_dir

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(config: LoggingConfig) -> logging.Logger:
    """Configures a rotating file logger plus stderr for the `repeaty` package."""
    logger = logging.getLogger("repeaty")
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.setLevel(config.level)

    log_file = config.log_file
    if not log_file.is_absolute():
        log_file = executable_dir() / log_file

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    try:
        # 5MB file size limit
        file_handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=2, encoding="utf-8")
    except OSError as exc:
        file_handler = None
        print(f"Cannot open log file {log_file}: {exc}", file=sys.stderr)
    if file_handler is not None:
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # Also log unhandled exceptions
    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("Uncaught exception:", exc_info=(exc_type, exc_value, exc_traceback))
        for handler in logger.handlers:
            handler.flush()

    sys.excepthook = handle_exception

    return logger
