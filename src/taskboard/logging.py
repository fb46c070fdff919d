"""Logging configuration for taskboard."""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

LOGGER_NAME = "taskboard"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that flood DEBUG output with request dumps
_NOISY_LOGGERS = ("boto3", "botocore", "urllib3")


def setup_logging(verbose: int = 0, log_file: Path | None = None) -> logging.Logger:
    """Configure the taskboard logger from verbosity level and optional file output.

    Args:
        verbose: Verbosity level (0=off, 1=INFO, 2+=DEBUG)
        log_file: Optional path to write logs to file

    Returns:
        The configured "taskboard" logger. Calling this again replaces the
        handlers installed by a previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)

    for handler in [h for h in logger.handlers if getattr(h, "_taskboard", False)]:
        logger.removeHandler(handler)
        handler.close()

    if verbose == 0 and log_file is None:
        return logger

    level = logging.DEBUG if verbose >= 2 else logging.INFO
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = []
    if verbose > 0:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler._taskboard = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    logger.info("=" * 60)
    logger.info("taskboard starting | %s | level=%s", timestamp, logging.getLevelName(level))
    logger.info("=" * 60)
    return logger
