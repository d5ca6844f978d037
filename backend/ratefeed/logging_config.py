from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from ratefeed.config.settings import LoggingSettings

# uvicorn runs with log_config=None, so its loggers get the same handlers.
_LOGGER_NAMES = ("ratefeed", "uvicorn")


def _build_handlers(config: LoggingSettings) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=config.format, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=log_path,
                maxBytes=config.max_bytes,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(config: LoggingSettings) -> logging.Logger:
    """Configure the ``ratefeed`` and ``uvicorn`` logger trees.

    Console output is always enabled; a rotating file handler is added when
    ``config.file`` is set. Returns the ``ratefeed`` logger.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    handlers = _build_handlers(config)

    for name in _LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers.clear()
        for handler in handlers:
            logger.addHandler(handler)
        logger.propagate = False

    logger = logging.getLogger("ratefeed")
    logger.debug("logging configured: level=%s file=%s", config.level, config.file)
    return logger
