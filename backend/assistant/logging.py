"""
Logging setup for the assistant backend.

Modules get their logger with:
    from assistant.logging import get_logger
    logger = get_logger(__name__)

and prefix messages with a subsystem tag from TAGS below so the output
stays searchable ("[EXTRACTOR] ...", "[PATCHER] ...").
"""

import logging
import sys


DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

ASSISTANT = "[ASSISTANT]"
EXTRACTOR = "[EXTRACTOR]"
PATCHER = "[PATCHER]"
LLM = "[LLM]"
STORE = "[STORE]"
ROUTES = "[ROUTES]"


def configure_logging(level=logging.INFO, fmt: str = DEFAULT_FORMAT, stream=sys.stdout):
    """
    Configure the root handler once. Calling it again only adjusts the level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
