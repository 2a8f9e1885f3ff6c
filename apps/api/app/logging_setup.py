from __future__ import annotations

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

_FORMAT = "[%(asctime)s] [%(name)s] %(levelname)s %(message)s"
_DATEFMT = "%H:%M:%S"


def _build_file_handler(log_path: Path) -> RotatingFileHandler:
    handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))
    handler.setLevel(logging.DEBUG)
    handler.name = "lectures_file"
    return handler


def _build_stream_handler(level: int) -> logging.StreamHandler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))
    handler.setLevel(level)
    handler.name = "lectures_stream"
    return handler


def _replace_handlers(logger: logging.Logger, handlers: list[logging.Handler]) -> None:
    logger.handlers = []
    for handler in handlers:
        logger.addHandler(handler)
    logger.propagate = False


def configure_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> Optional[Path]:
    """Install stream (and optionally rotating file) handlers on the ``lectures`` and uvicorn loggers.

    Returns the log file path when file logging is enabled.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handlers: list[logging.Handler] = [_build_stream_handler(numeric_level)]
    log_path: Optional[Path] = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        log_path = log_dir / f"server_{timestamp}.log"
        handlers.append(_build_file_handler(log_path))

    app_logger = logging.getLogger("lectures")
    app_logger.setLevel(logging.DEBUG if log_path else numeric_level)
    _replace_handlers(app_logger, handlers)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv_logger = logging.getLogger(name)
        uv_logger.setLevel(logging.INFO)
        _replace_handlers(uv_logger, handlers)

    app_logger.info("Logging initialized level=%s file=%s", level, log_path)
    return log_path
