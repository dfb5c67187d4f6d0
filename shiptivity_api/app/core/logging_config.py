"""
Logging setup shared by the API and the uvicorn server.

``setup_logging`` installs one console handler, plus a file handler
when ``LOG_FILE`` is set, on the root logger.  Uvicorn's own loggers
(``uvicorn``, ``uvicorn.error`` and ``uvicorn.access``) are stripped of
their handlers and made to propagate, so server start-up lines and
access lines land in the same stream and file as the application's
records.  ``run.py`` starts uvicorn with ``log_config=None`` for that
reason.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_installed: List[logging.Handler] = []


def _route_uvicorn_loggers(level: int) -> None:
    for name in UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
        server_logger.setLevel(level)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, force: bool = False) -> None:
    """Configure the root logger and route uvicorn's loggers to it.

    Handlers are installed once per process; later calls only re-apply
    the level and the uvicorn routing.  ``force=True`` removes the
    handlers installed earlier and installs new ones.

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.  Unknown names fall back
        to ``INFO``.
    logfile : Optional[str]
        File to append records to, in addition to the console.
    force : bool
        Replace handlers installed by an earlier call.
    """
    root = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if force:
        reset_logging()

    if not _installed:
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        _installed.append(console_handler)

        if logfile:
            file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
            file_handler.setFormatter(formatter)
            _installed.append(file_handler)

        for handler in _installed:
            root.addHandler(handler)

    root.setLevel(numeric_level)
    _route_uvicorn_loggers(numeric_level)


def reset_logging() -> None:
    """Detach and close the handlers installed by ``setup_logging``."""
    root = logging.getLogger()
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()
