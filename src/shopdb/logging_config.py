"""Process-wide logging: configured once at startup, flushed on exit."""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ACCESSOR_LOGGER = "shopdb.accessor"


def configure_logging(log_file: str, level: int = logging.INFO) -> logging.Handler:
    """Send all records to ``log_file``.

    Returns the handler so the caller can hand it to shutdown_logging().
    """
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)
    return handler


def get_accessor_logger() -> logging.Logger:
    """Logger injected into every DatabaseAccessor the menu opens."""
    return logging.getLogger(ACCESSOR_LOGGER)


def shutdown_logging(handler: logging.Handler) -> None:
    """Flush and detach the handler from configure_logging()."""
    logging.getLogger().removeHandler(handler)
    handler.flush()
    handler.close()
