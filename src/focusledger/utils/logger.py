"""Application log file for focusledger.

Every command is a short process, so the log is the only trace of what the
timer did between invocations: sessions recovered or discarded at boot,
segments too short to record, retention cleanups and store failures.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

from focusledger.models.config_models import LogConfig

_APP_NAME = "focusledger"
_LOG_FILE = "focusledger.log"

_logger: logging.Logger | None = None


def log_path(log_config: LogConfig) -> Path:
    """Where the log file lives for *log_config*."""
    if log_config.directory:
        return Path(log_config.directory).expanduser() / _LOG_FILE
    return Path(user_log_dir(_APP_NAME)) / _LOG_FILE


def get_logger(log_config: LogConfig | None = None) -> logging.Logger:
    """Return the ``focusledger`` logger, attaching its file handler on first call.

    The first caller's *log_config* decides the level and location; later
    calls get the configured logger back unchanged. Package modules log
    through ``logging.getLogger(__name__)`` and reach the same file.
    """
    global _logger
    if _logger is not None:
        return _logger

    log_config = log_config or LogConfig()
    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(log_config.level)
    logger.propagate = False

    if not logger.handlers:
        path = log_path(log_config)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        logger.addHandler(handler)

    _logger = logger
    return _logger
