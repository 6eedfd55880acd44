import logging
import os
import sys
from typing import Optional, TextIO

from tqdm import tqdm

LOGGER_NAME = "translation_extractor"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class TqdmLoggingHandler(logging.Handler):
    """Console handler that writes through tqdm so the owner-file progress bar stays intact."""

    def __init__(self, level=logging.NOTSET, stream: Optional[TextIO] = None):
        super().__init__(level)
        self.stream = stream

    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=self.stream or sys.stderr)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception:
            self.handleError(record)


def _file_handler(log_file_path: str) -> logging.FileHandler:
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    return logging.FileHandler(log_file_path, encoding='utf-8')


def setup_logger(log_level_str: str, log_file_path: Optional[str], log_to_console: bool) -> logging.Logger:
    """
    Configure the package logger that every extractor module logs through.

    Module loggers are ``logging.getLogger(__name__)`` children of this logger,
    so configuring it once covers the whole package. Calling it again replaces
    the previous handlers.

    Args:
        log_level_str: Level name such as 'INFO' or 'debug'; unknown names mean INFO.
        log_file_path: Log file to append to; empty or None disables file logging.
        log_to_console: Also write records to stderr through tqdm.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level_str.upper(), logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    handlers = []
    if log_file_path:
        handlers.append(_file_handler(log_file_path))
    if log_to_console:
        handlers.append(TqdmLoggingHandler())

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
