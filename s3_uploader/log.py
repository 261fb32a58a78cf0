"""
Logging helpers for the uploader.
"""
import logging
import sys
import threading

LOGGER_NAME = "s3_uploader"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_lock = threading.Lock()
_configured = False


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: Whether to enable debug logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stdout
    )


def default_logger() -> logging.Logger:
    """Return the package logger, writing INFO lines to standard output.

    The stdout handler is attached once per process, and only when the
    logger has no handlers of its own. Once attached, records no longer
    propagate to the root logger.
    """
    global _configured
    log = logging.getLogger(LOGGER_NAME)
    with _lock:
        if not _configured:
            if not log.handlers:
                handler = logging.StreamHandler(sys.stdout)
                handler.setFormatter(logging.Formatter(LOG_FORMAT))
                log.addHandler(handler)
                # Keep package lines off any root handlers the caller installed
                log.propagate = False
            if log.level == logging.NOTSET:
                log.setLevel(logging.INFO)
            _configured = True
    return log
