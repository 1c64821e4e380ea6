import json
import logging
import os
import sys
import time


def _default_log_level() -> str:
    return os.environ.get("HOME_FINANCING_LOG_LEVEL", "WARNING").upper()


class JsonLogFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # attach contextual info if provided
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            payload.update(ctx)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(_default_log_level())
        logger.propagate = False
    return logger


def set_log_level(level: str, namespace: str = "home_financing") -> None:
    """Apply ``level`` to every logger already created under ``namespace``."""
    level = level.upper()
    for name in list(logging.Logger.manager.loggerDict):
        if name == namespace or name.startswith(namespace + "."):
            logging.getLogger(name).setLevel(level)
