"""Logging setup."""

import logging

from rich.logging import RichHandler
from textual.logging import TextualHandler


LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str = "WARNING", tui: bool = False) -> logging.Handler:
    """Install one root handler for fountainnav.

    Command line runs log through rich on stderr. While the terminal UI owns
    the screen, records go to the textual devtools console instead.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, (RichHandler, TextualHandler)):
            root.removeHandler(handler)

    if tui:
        handler = TextualHandler()
    else:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root.addHandler(handler)
    root.setLevel(level.upper())
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
