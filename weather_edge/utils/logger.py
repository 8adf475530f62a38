import json
import logging
import sys
import traceback
import uuid
from datetime import datetime
from typing import Optional

from structlog.contextvars import bind_contextvars, clear_contextvars, get_contextvars

from weather_edge.config.settings import settings

# ANSI color codes for console output
COLORS = {
    "DEBUG": "\033[36m",    # Cyan
    "INFO": "\033[32m",     # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",    # Red
    "CRITICAL": "\033[35m", # Magenta
    "RESET": "\033[0m"      # Reset
}

# Context keys copied from structlog contextvars onto every record
CONTEXT_FIELDS = ("correlation_id", "request_id")

SKIP_FIELDS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "taskName", "getMessage",
    "exc_info", "exc_text", "stack_info", "message", *CONTEXT_FIELDS,
}


class ColorizedJSONFormatter(logging.Formatter):
    """
    JSON formatter with optional console colorization
    """

    def __init__(self, enable_color: bool = True, pretty_print: bool = False):
        super().__init__()
        self.enable_color = enable_color
        self.pretty_print = pretty_print

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON with optional colorization"""

        log_object = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value:
                log_object[field] = value

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            log_object["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb)
            }

        # Anything passed through `extra=`
        extra_fields = {}
        for key, value in record.__dict__.items():
            if key in SKIP_FIELDS:
                continue
            if isinstance(value, (str, int, float, bool, type(None), list, dict)):
                extra_fields[key] = value
            else:
                extra_fields[key] = str(value)

        if extra_fields:
            log_object["extra"] = extra_fields

        if self.pretty_print:
            json_str = json.dumps(log_object, indent=2, ensure_ascii=False, default=str)
        else:
            json_str = json.dumps(log_object, ensure_ascii=False, separators=(',', ':'), default=str)

        if self.enable_color and record.levelname in COLORS:
            return f"{COLORS[record.levelname]}{json_str}{COLORS['RESET']}"

        return json_str


class PrettyFormatter(logging.Formatter):
    """
    Human-readable formatter with colorization
    """

    def __init__(self, enable_color: bool = True):
        super().__init__()
        self.enable_color = enable_color

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        base_msg = f"[{timestamp}] {record.levelname:8} {record.name}:{record.lineno} - {record.getMessage()}"

        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            base_msg += f" [correlation_id={correlation_id}]"

        if record.exc_info:
            base_msg += "\n" + self.formatException(record.exc_info)

        if self.enable_color and record.levelname in COLORS:
            return f"{COLORS[record.levelname]}{base_msg}{COLORS['RESET']}"

        return base_msg


class CorrelationLogger:
    """
    Logger wrapper that stamps every record with the request's correlation context
    """

    def __init__(self, name: str = "weather_edge"):
        self.name = name
        self._logger = logging.getLogger(name)
        self._setup_logger()

    def _setup_logger(self):
        """Attach a stdout handler with the formatter selected by settings"""

        self._logger.handlers.clear()
        self._logger.setLevel(getattr(logging, settings.LOG_LEVEL))

        console_handler = logging.StreamHandler(sys.stdout)

        if settings.LOG_FORMAT == "json":
            formatter = ColorizedJSONFormatter(
                enable_color=settings.LOG_COLOR,
                pretty_print=settings.LOG_PRETTY,
            )
        else:
            formatter = PrettyFormatter(enable_color=settings.LOG_COLOR)

        console_handler.setFormatter(formatter)
        self._logger.addHandler(console_handler)

        # Prevent propagation to root logger
        self._logger.propagate = False

    def _log(self, level: int, msg: str, *args, **kwargs):
        """Internal logging method that adds correlation context"""

        extra = kwargs.pop('extra', None) or {}

        context = get_contextvars()
        for key in CONTEXT_FIELDS:
            value = context.get(key)
            if value:
                extra[key] = value

        kwargs['extra'] = extra
        self._logger.log(level, msg, *args, stacklevel=3, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs):
        self._log(logging.CRITICAL, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        """Log error with traceback"""
        kwargs['exc_info'] = True
        self._log(logging.ERROR, msg, *args, **kwargs)

    def set_context(self, **context):
        """Bind context for all subsequent log messages in this task"""
        bind_contextvars(**context)

    def clear_context(self):
        clear_contextvars()


logger = CorrelationLogger(name="weather_edge")


def get_logger(name: str = "weather_edge") -> CorrelationLogger:
    return CorrelationLogger(name=name)


# Correlation ID utilities
def generate_correlation_id() -> str:
    """Generate a new correlation ID"""
    return str(uuid.uuid4())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context"""
    return get_contextvars().get('correlation_id')


def set_correlation_id(correlation_id: str):
    """Set correlation ID in context"""
    bind_contextvars(correlation_id=correlation_id)
