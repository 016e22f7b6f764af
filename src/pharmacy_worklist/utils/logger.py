from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Send pharmacy_worklist logs to stderr at ``level``.

    The handler is attached once, so the CLI and the MCP server can both
    call this. httpx request logging is kept at WARNING so bulk reloads
    triggered by push events do not flood the log.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root = logging.getLogger("pharmacy_worklist")
    root.setLevel(numeric_level)
    if not root.handlers:
        root.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
