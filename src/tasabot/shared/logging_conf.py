"""
Logging Configuration - Logging Setup and Configuration

Root logging for TasaBot: one line format shared by the console and the
optional rotating log file, plus level overrides for the chatty libraries
underneath the bot (httpx for Telegram calls, APScheduler for the daily
job, uvicorn for the liveness endpoint).

setup_logging is called twice by tasabot.app: once with defaults before the
settings load (so configuration errors are visible), and again with the
LOG_* settings when file logging is requested.

Files that USE this module:
- tasabot.app (setup_logging function for logging initialization)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "tasabot.log"
STDOUT_ENV = "TASABOT_LOG_STDOUT"

# httpx logs every Telegram request at INFO, APScheduler every job run
QUIET_LOGGERS: Dict[str, int] = {
    "httpx": logging.WARNING,
    "apscheduler": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def resolve_log_path(
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Pick the log file path; log_dir wins over log_file. Creates parent dirs."""
    if log_dir:
        path = Path(log_dir) / LOG_FILE_NAME
    elif log_file:
        path = Path(log_file)
    else:
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _stdout_enabled() -> bool:
    # Supervisors that capture stdout themselves can turn this off
    return os.environ.get(STDOUT_ENV, "true").lower() == "true"


def setup_logging(
    level=logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> Optional[Path]:
    """
    Configure application-wide logging settings.

    Args:
        level: Logging level (default: logging.INFO)
        log_file: Optional path to log file (enables file logging)
        log_dir: Optional directory for log files (file is named tasabot.log)
        max_bytes: Maximum size per log file before rotation (default: 10MB)
        backup_count: Number of backup log files to keep (default: 5)

    Returns:
        The log file path, or None when logging only to stdout
    """
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: List[logging.Handler] = []

    log_file_path = resolve_log_path(log_file, log_dir)
    if log_file_path is not None:
        handlers.append(RotatingFileHandler(
            log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        ))

    # stdout stays on when there is nowhere else to write
    if _stdout_enabled() or not handlers:
        handlers.insert(0, logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(formatter)

    # force: the second call replaces the bootstrap handlers
    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    logger = logging.getLogger(__name__)
    if log_file_path is not None:
        logger.info("Logging configured: file=%s, level=%s", log_file_path, logging.getLevelName(level))
    else:
        logger.info("Logging configured: stdout, level=%s", logging.getLevelName(level))
    return log_file_path
