"""Logging configuration for the Nest Monitor application."""

import logging
import sys

_configured = False

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s - %(message)s"


def configure(
    level: int | str = logging.INFO,
    handler: logging.Handler | None = None,
) -> None:
    """Configure logging for the application.

    Safe to call multiple times - only configures once.

    Args:
        level: Log level for the 'nestmon' namespace.
        handler: Handler to install. Defaults to a stderr stream handler;
            the terminal dashboard passes a rich handler bound to its
            live console instead.
    """
    global _configured
    if _configured:
        return

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("nestmon")
    root.setLevel(level)
    root.addHandler(handler)

    # Configure uvicorn root logger to use the same format
    # (child loggers like uvicorn.error propagate to this)
    uv_log = logging.getLogger("uvicorn")
    uv_log.handlers.clear()
    uv_log.addHandler(handler)

    # Silence per-request httpx logs, one line per device every cycle
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the 'nestmon' namespace.

    Args:
        name: Logger name (will be prefixed with 'nestmon.')

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(f"nestmon.{name}")
