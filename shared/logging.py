"""Logging setup for the terminal front end."""

import logging

from rich.logging import RichHandler

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """
    Route the standard logging tree through a Rich handler.

    Library modules only ever call logging.getLogger(__name__); this is
    called once by the entry point. Repeated calls just update the level.
    """
    global _configured

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if _configured:
        return

    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)

    # httpx logs every request at INFO, which drowns the prompts
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True
