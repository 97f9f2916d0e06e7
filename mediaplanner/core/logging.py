# mediaplanner/core/logging.py
import logging
from mediaplanner.config import settings

def get_logger(name: str) -> logging.Logger:
    """
    Logger with a timestamped stream handler; level comes from LOG_LEVEL.
    Extra fields passed via `extra=` are appended as key=value pairs.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(settings.log_level)
        handler = logging.StreamHandler()
        handler.setLevel(settings.log_level)
        handler.setFormatter(_KeyValueFormatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    return logger


_RESERVED = set(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


class _KeyValueFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {k: v for k, v in vars(record).items() if k not in _RESERVED}
        if not extras:
            return base
        return base + " " + " ".join(f"{k}={v}" for k, v in sorted(extras.items()))
