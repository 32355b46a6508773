from __future__ import annotations

import logging

_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

_handler: logging.Handler | None = None


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single console handler.

    Calling it again only updates the level, so the app factory can run more
    than once in the same process (tests do).
    """

    global _handler
    root = logging.getLogger()
    root.setLevel(level.upper())
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    if _handler not in root.handlers:
        root.addHandler(_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)
