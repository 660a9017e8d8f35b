import logging
import json
import sys
import time
import uuid
import os

LOGGER_NAME = "upload_analyzer"


class _C:
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    MAGENTA = "\033[35m"


def _use_color() -> bool:
    # LOG_COLOR=1 and a TTY on stdout
    return os.getenv("LOG_COLOR", "0") == "1" and sys.stdout.isatty()


def _event_color(event_type: str) -> str:
    et = (event_type or "").upper()
    if "FAILED" in et or "ERROR" in et:
        return _C.RED
    if "WARNING" in et:
        return _C.YELLOW
    if "STARTED" in et or "COMPLETED" in et:
        return _C.GREEN
    if "COMMIT" in et:
        return _C.CYAN
    return _C.MAGENTA


def _event_level(event_type: str) -> int:
    et = (event_type or "").upper()
    if "FAILED" in et or "ERROR" in et:
        return logging.ERROR
    if "WARNING" in et:
        return logging.WARNING
    return logging.INFO


def get_logger():
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter('%(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


logger = get_logger()


# One id per analyze / commit call, carried on every event it emits
def generate_request_id():
    return str(uuid.uuid4())


# One JSON line per event; level follows the event name
def log_event(event_type: str, payload: dict):
    record = {"event_type": event_type, **payload}
    text = json.dumps(record, default=str)
    level = _event_level(event_type)

    if _use_color():
        color = _event_color(event_type)
        logger.log(level, f"{color}{text}{_C.RESET}")
    else:
        logger.log(level, text)


# Wall-clock seconds reported on *_COMPLETED events
class RequestTimer:
    """
    Simple execution timer.
    """
    def __init__(self):
        self.start_time = time.time()

    def duration(self):
        return round(time.time() - self.start_time, 4)
