import logging
import logging.handlers
import multiprocessing as mp
from typing import List, Optional, Tuple

_LOGGER_NAME = "mandeltile"
_LOG_FORMAT = "%(asctime)s %(processName)s %(levelname)s %(name)s - %(message)s"
_ROTATE_BYTES = 5 * 1024 * 1024
_ROTATE_COUNT = 3

def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)

def _replace_handlers(logger: logging.Logger, handlers: List[logging.Handler], level: int) -> None:
    logger.setLevel(level)
    logger.propagate = False
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    for h in handlers:
        h.setLevel(level)
        logger.addHandler(h)

def configure_root_logging(*, level: int = logging.INFO, console: bool = True, log_file: Optional[str] = None) -> logging.Logger:
    """Console and/or rotating file output for the mandeltile logger."""
    fmt = logging.Formatter(fmt=_LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    handlers: List[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file, maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_COUNT, encoding="utf-8"
        ))
    for h in handlers:
        h.setFormatter(fmt)
    logger = get_logger()
    _replace_handlers(logger, handlers, level)
    return logger

def start_log_forwarding() -> Tuple["mp.Queue", logging.handlers.QueueListener]:
    """Queue that pool workers log into, drained by the parent's current handlers."""
    queue: "mp.Queue" = mp.Queue(-1)
    listener = logging.handlers.QueueListener(queue, *get_logger().handlers, respect_handler_level=True)
    listener.start()
    return queue, listener

def worker_logging_initialiser(queue: "mp.Queue", level: int) -> None:
    _replace_handlers(get_logger(), [logging.handlers.QueueHandler(queue)], level)
