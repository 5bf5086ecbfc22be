"""Logging utilities."""
import logging
import sys
from typing import Optional, Union


def setup_logger(name: str = "solidgym", level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Sets up the application logger.
    Module loggers (core.*, services.*, ui.*) propagate to the root, so the
    handler is attached there once and tagged with the app name.

    Args:
        name (str): Logger name used for the app's own messages.
        level (int | str, optional): Logging level. Defaults to INFO.

    Returns:
        logging.Logger: The configured application logger.
    """
    if level is None:
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Don't stack handlers if the app restarts after logout
    if not any(getattr(h, "_solidgym", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        handler._solidgym = True
        root.addHandler(handler)

    # httpx logs every request at INFO; keep it quiet unless debugging
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logging.getLogger(name)
