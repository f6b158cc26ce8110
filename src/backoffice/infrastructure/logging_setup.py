"""Logging configuration for the CLI process."""

from __future__ import annotations

import logging
import logging.handlers

from backoffice.infrastructure.settings import Settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_MARKER = "_backoffice_handler"


def setup_logging(settings: Settings, verbose: bool = False) -> None:
    """Attach a stderr handler (and a rotating file handler when
    ``log_file`` is set) to the ``backoffice`` logger.

    Safe to call more than once; handlers are only added the first time.
    """
    level = logging.DEBUG if verbose else logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    # Only warnings reach the terminal unless asked for more.
    stream_level = level if verbose else max(level, logging.WARNING)

    logger = logging.getLogger("backoffice")
    logger.setLevel(level)

    # avoid duplicate handlers
    existing = [h for h in logger.handlers if getattr(h, _MARKER, False)]
    if existing:
        for h in existing:
            if not isinstance(h, logging.FileHandler):
                h.setLevel(stream_level)
        return

    fmt = logging.Formatter(_FORMAT)

    stream = logging.StreamHandler()
    stream.setFormatter(fmt)
    stream.setLevel(stream_level)
    setattr(stream, _MARKER, True)
    logger.addHandler(stream)

    if settings.log_file is not None:
        log_path = settings.log_file.expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
        )
        handler.setFormatter(fmt)
        handler.setLevel(level)
        setattr(handler, _MARKER, True)
        logger.addHandler(handler)
