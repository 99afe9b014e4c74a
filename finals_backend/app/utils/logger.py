# finals_backend/app/utils/logger.py
import logging
import sys
from logging.handlers import RotatingFileHandler

from ..config import Settings

settings = Settings()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def setup_logger(name: str, log_dir: str = "backend") -> logging.Logger:
    """
    Logger writing to LOGS_DIR/<log_dir>/<name>.log and to stdout.

    Calling it again for the same name replaces the handlers instead of
    stacking them, so modules can set up their logger at import time.
    """
    log_path = settings.LOGS_DIR / log_dir
    log_path.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = (
        RotatingFileHandler(log_path / f"{name}.log", maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS),
        logging.StreamHandler(sys.stdout),
    )
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
