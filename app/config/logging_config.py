"""Process-wide logging configuration."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def config_configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at process startup.

    Args:
        level: Logging level name.

    Returns:
        None: Root logger handlers are replaced as side effect.

    Raises:
        ValueError: Raised when level name is unknown.
    """

    normalized_level = level.strip().upper()
    if normalized_level not in logging.getLevelNamesMapping():
        raise ValueError(f"unsupported log level: {level}")

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(normalized_level)
    # replace handlers so repeated startup does not duplicate output
    root_logger.handlers = [handler]
