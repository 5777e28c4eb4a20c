import logging
import logging.handlers
import multiprocessing as mp
from typing import Optional

_LOGGER_NAME = "quatfractal"
DEFAULT_LOG_FILE = "quatfractal.log"


def get_logger(child: Optional[str] = None) -> logging.Logger:
    if child:
        return logging.getLogger(f"{_LOGGER_NAME}.{child}")
    return logging.getLogger(_LOGGER_NAME)


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(processName)s %(levelname)s %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def _reset_handlers(logger: logging.Logger) -> None:
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


def configure_root_logging(
    *,
    level: int = logging.INFO,
    console: bool = True,
    log_file: Optional[str] = DEFAULT_LOG_FILE,
    rotate_bytes: int = 2 * 1024 * 1024,
    rotate_count: int = 3,
) -> logging.Logger:
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    _reset_handlers(logger)
    fmt = _build_formatter()
    if console:
        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(fmt)
        logger.addHandler(ch)
    if log_file:
        fh = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=rotate_bytes, backupCount=rotate_count, encoding="utf-8"
        )
        fh.setLevel(level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    return logger


def create_log_queue() -> mp.Queue:
    return mp.Queue(-1)


def start_queue_listener(queue: mp.Queue, listener_logger: logging.Logger) -> logging.handlers.QueueListener:
    listener = logging.handlers.QueueListener(queue, *listener_logger.handlers, respect_handler_level=True)
    listener.start()
    return listener


def logging_initialiser(queue: Optional[mp.Queue], level: int) -> None:
    """Pool initializer hook: route this worker's records through the parent's queue."""
    if queue is None:
        return
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    _reset_handlers(logger)
    qh = logging.handlers.QueueHandler(queue)
    qh.setLevel(level)
    logger.addHandler(qh)
