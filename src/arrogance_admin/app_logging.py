"""Logging configuration helpers."""

import logging


def configure_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure application logging with a single handler.

    The console owns the terminal, so a ``log_file`` keeps log lines out of
    the rendered view.
    """
    logger = logging.getLogger("arrogance_admin")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
