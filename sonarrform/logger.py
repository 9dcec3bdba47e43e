from logging import handlers
import logging
import os
import sys
import threading

from sonarrform.constants import SENSITIVE_VALUE
from sonarrform.utils import redact

# File logging only
FILENAME = "sonarrform.log"
MAX_SIZE = 5000000  # 5 MB
MAX_FILES = 5

LOG_FORMAT = "%(asctime)s - %(levelname)-7s :: %(name)s : %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("sonarrform")

_secrets = set()
_secrets_lock = threading.Lock()


def register_secret(value):
    """Mask ``value`` in every record emitted through the sonarrform handlers."""
    if value:
        with _secrets_lock:
            _secrets.add(str(value))


class MaxLevelFilter(logging.Filter):
    def __init__(self, max_level):
        super().__init__()
        self.max_level = max_level

    def filter(self, record):
        return record.levelno <= self.max_level


class SecretFilter(logging.Filter):
    """Rewrites the rendered message of a record with registered secrets masked."""

    def filter(self, record):
        with _secrets_lock:
            secrets = list(_secrets)
        if secrets:
            record.msg = redact(record.getMessage(), secrets, SENSITIVE_VALUE)
            record.args = None
        return True


def init_logger(console=False, log_dir=False, verbose=False):
    """
    Route the 'sonarrform' logger to the runner's outputs.

    * log_dir: rotating sonarrform.log, always at DEBUG
    * console: INFO and below on stdout, WARNING and up on stderr

    Calling it again replaces the previous handlers, so the runner can switch
    to verbose output after the manifest is loaded.
    """

    remove_old_handlers()
    configure_logger(verbose)

    if log_dir:
        setup_file_logger(log_dir)

    if console:
        setup_console_logger()


def remove_old_handlers():
    for handler in logger.handlers[:]:
        if isinstance(handler, handlers.RotatingFileHandler):
            handler.close()
        elif isinstance(handler, logging.StreamHandler):
            handler.flush()

        logger.removeHandler(handler)


def configure_logger(verbose):
    logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _attach(handler, level, max_level=None):
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler.addFilter(SecretFilter())
    if max_level is not None:
        handler.addFilter(MaxLevelFilter(max_level))

    logger.addHandler(handler)
    return handler


def setup_file_logger(log_dir):
    os.makedirs(log_dir, exist_ok=True)
    path = os.path.join(log_dir, FILENAME)

    return _attach(
        handlers.RotatingFileHandler(path, maxBytes=MAX_SIZE, backupCount=MAX_FILES, encoding="utf-8"),
        logging.DEBUG,
    )


def setup_console_logger():
    _attach(logging.StreamHandler(sys.stdout), logging.DEBUG, max_level=logging.INFO)
    _attach(logging.StreamHandler(sys.stderr), logging.WARNING)


info = logger.info
error = logger.error
debug = logger.debug
warning = logger.warning
exception = logger.exception
