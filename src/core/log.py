"""Logging setup.

Modules log through `logging.getLogger(__name__)`; only the entry point
decides where records go. The CLI routes them through Rich so progress
lines share the console with tables and panels.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "node-geo-filter"


def configure_logging(level: str | int = "INFO", *, console: Console | None = None) -> None:
    """Install a single RichHandler on the root logger (idempotent)."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)

    # httpx logs every request URL at INFO, which would include the token.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
