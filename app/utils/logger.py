# app/utils/logger.py
"""
Centralised logging configuration for the entire application.
Logs to console and to a rotating file under LOG_DIR, each with its own level.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from app.config import Settings, settings

_configured = False


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{name}'")
    return level


def handler_levels(config: Settings) -> tuple[int, int]:
    """(console, file) levels. An empty LOG_FILE_LEVEL follows LOG_LEVEL."""
    console = _level(config.LOG_LEVEL)
    return console, _level(config.LOG_FILE_LEVEL) if config.LOG_FILE_LEVEL else console


def log_file_path(config: Settings) -> str:
    if os.path.isabs(config.LOG_DIR):
        log_dir = config.LOG_DIR
    else:
        log_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), config.LOG_DIR)
    return os.path.join(log_dir, config.LOG_FILE)


def _configure_root_logger(config: Settings = settings):
    global _configured
    if _configured:
        return
    _configured = True

    console_level, file_level = handler_levels(config)
    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(fmt)

    path = log_file_path(config)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    file_handler = RotatingFileHandler(
        filename=path,
        maxBytes=config.LOG_FILE_MAX_MB * 1024 * 1024,
        backupCount=config.LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)

    root = logging.getLogger()
    # Root passes everything either handler wants; each handler filters for itself
    root.setLevel(min(console_level, file_level))
    root.addHandler(console)
    root.addHandler(file_handler)

    # PyAV forwards FFmpeg's own chatter under "libav"
    logging.getLogger("libav").setLevel(max(file_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
