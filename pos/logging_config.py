"""Logging setup for the POS service and terminal front-end.

Modules log through ``logging.getLogger(__name__)``; this module only
decides where records go. Output is rendered by rich so it matches the
rest of the terminal output.
"""

import logging

from rich.logging import RichHandler


def configure_logging(level: str = "INFO") -> None:
    """Attach a single rich handler to the root logger.

    Calling it again replaces the handler instead of stacking a second one.
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
