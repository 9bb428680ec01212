import logging
import json

import numpy as np

_RESERVED_ATTRS = frozenset((
    "levelname", "msg", "args", "name", "levelno", "pathname", "filename", "module",
    "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created", "msecs",
    "relativeCreated", "thread", "threadName", "processName", "process", "message",
    "asctime", "taskName",
))


def _to_jsonable(value):
    """numpy scalars and arrays show up in 'extra' (split sizes, shapes)."""
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, tuple):
        return list(value)
    return value


class JsonFormatter(logging.Formatter):
    """Format log records as JSON objects."""
    def format(self, record):
        log_record = {
            "level": record.levelname,
            "time": self.formatTime(record, self.datefmt),
            "name": record.name,
            "message": record.getMessage(),
        }
        # Add any extra fields passed via 'extra'
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_record[key] = _to_jsonable(value)
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def setup_json_logging(level=logging.INFO, stream=None):
    """Configure root logger to use JSON formatting."""
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)
