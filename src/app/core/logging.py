"""Setting up a file logger for the survey service.

Returns a lazily initialized module logger that writes to a file
`{logging_dir}/{filename}` with a timestamp and level prefix.
"""
import os
from logging import FileHandler, Formatter, getLogger
from src.app.core.config import settings


def get_logs_writer_logger(logging_dir=settings.LOG_PATH, filename='logs.log'):
    os.makedirs(logging_dir, exist_ok=True)
    log_path = os.path.join(logging_dir, filename)

    logger = getLogger("credit_survey")

    if logger.handlers:
        return logger

    logger.setLevel(settings.LOG_LEVEL.upper())
    logger.propagate = False

    handler = FileHandler(log_path, mode="a", encoding="utf-8", delay=True)
    handler.setFormatter(Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)

    return logger
