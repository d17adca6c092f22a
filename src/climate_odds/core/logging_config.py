"""
Logging Setup
=============

Stdlib logging for the API process:
- one JSON object per line when ENVIRONMENT=production (and in log files)
- colored single-line records on the console everywhere else
- every record tagged with the request id of the HTTP call being served
- helpers for timing blocks, external API calls and finished queries
"""

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from climate_odds.core.config import settings

NO_REQUEST_ID = "no-request-id"
CONSOLE_FORMAT = "%(asctime)s - %(name)-30s - %(levelname)s - [%(request_id)s] %(message)s"
CONSOLE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every request at INFO
NOISY_LOGGERS = ("uvicorn", "httpx", "httpcore")


# =================================================================
# REQUEST ID
# =================================================================

# Set by the API middleware for the duration of one HTTP request
request_id_context: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default=NO_REQUEST_ID
)


class RequestIDFilter(logging.Filter):
    """Copy the current request id onto each record as `request_id`."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_context.get()
        return True


# =================================================================
# FORMATTERS
# =================================================================

class StructuredFormatter(logging.Formatter):
    """
    Render a record as a single JSON object.

    Keys: timestamp (UTC, trailing Z), level, logger, message, module,
    function, line, plus request_id and exception when present. A dict in
    `record.extra_data` is merged into the top level.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).replace(tzinfo=None)
        payload: Dict[str, Any] = {
            "timestamp": f"{timestamp.isoformat()}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = getattr(record, "request_id", None)
        if request_id is not None:
            payload["request_id"] = request_id

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, dict):
            payload.update(extra_data)

        return json.dumps(payload, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter that paints the level name with ANSI colors."""

    COLORS = {
        "DEBUG": "\033[37m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        plain = record.levelname
        color = self.COLORS.get(plain)
        if color:
            record.levelname = f"{color}{plain:8}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # Other handlers see the plain level name
            record.levelname = plain


# =================================================================
# HANDLERS
# =================================================================

def get_console_handler() -> logging.StreamHandler:
    """stdout handler: JSON in production, colored text otherwise."""
    handler = logging.StreamHandler(sys.stdout)

    if settings.is_production:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT))

    handler.addFilter(RequestIDFilter())
    return handler


def get_file_handler(log_file: Path) -> Optional[logging.FileHandler]:
    """
    JSON file handler for log_file.

    Returns None (with a warning) when the log directory cannot be created,
    so a read-only filesystem degrades to console-only logging.
    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        import warnings
        warnings.warn(f"Could not create log directory: {e}. File logging disabled.")
        return None

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(StructuredFormatter())
    handler.addFilter(RequestIDFilter())
    return handler


# =================================================================
# SETUP
# =================================================================

def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    enable_file_logging: bool = True
) -> None:
    """
    (Re)configure the root logger.

    Args:
        log_level: Level name, settings.LOG_LEVEL when omitted
        log_file: JSON log file, settings.LOG_FILE when omitted
        enable_file_logging: Attach the file handler when a file is known

    Calling it again replaces the previous handlers.
    """
    level = (log_level or settings.LOG_LEVEL).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(get_console_handler())

    log_file = log_file or settings.LOG_FILE
    file_handler = None
    if enable_file_logging and log_file is not None:
        file_handler = get_file_handler(Path(log_file))
        if file_handler:
            root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"🔧 Logging configured: level={level}, environment={settings.ENVIRONMENT}")
    if file_handler:
        logger.info(f"📝 File logging enabled: {log_file}")


def get_logger(name: str) -> logging.Logger:
    """Named logger carrying its own RequestIDFilter."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIDFilter) for f in logger.filters):
        logger.addFilter(RequestIDFilter())
    return logger


# =================================================================
# TIMING AND EVENT HELPERS
# =================================================================

class PerformanceLogger:
    """
    Time a block and log how long it took.

    Example:
        >>> with PerformanceLogger("assemble temperature samples") as perf:
        ...     samples = await assemble(window, source, variable, lat, lon)
        >>> perf.elapsed
        0.0123
    """

    def __init__(self, operation_name: str, logger_name: Optional[str] = None):
        self.operation_name = operation_name
        self.logger = get_logger(logger_name or __name__)
        self.start_time: Optional[datetime] = None
        self.elapsed: Optional[float] = None

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.debug(f"⏱️  Started: {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = (datetime.now() - self.start_time).total_seconds()

        if exc_type:
            self.logger.error(
                f"❌ Failed: {self.operation_name} ({self.elapsed:.2f}s)",
                exc_info=True
            )
        else:
            self.logger.info(f"✅ Completed: {self.operation_name} ({self.elapsed:.2f}s)")


def log_api_call(
    logger: logging.Logger,
    method: str,
    url: str,
    status_code: int,
    elapsed_ms: float,
    **extra_data
):
    """
    Log one outbound HTTP call; 4xx/5xx responses are logged as errors.

    Example:
        >>> log_api_call(logger, "GET", settings.NASA_POWER_BASE_URL,
        ...              status_code=200, elapsed_ms=834.5, parameter="T2M")
    """
    api_call = {
        "method": method,
        "url": url,
        "status_code": status_code,
        "elapsed_ms": elapsed_ms,
        **extra_data
    }

    level = logging.INFO if status_code < 400 else logging.ERROR
    logger.log(
        level,
        f"API Call: {method} {url} [{status_code}] ({elapsed_ms:.1f}ms)",
        extra={"extra_data": {"api_call": api_call}}
    )


def log_query(
    logger: logging.Logger,
    variable: str,
    lat: float,
    lon: float,
    total: int,
    valid: int,
    cached: bool
):
    """Log a finished climate query with its sample counts as structured data."""
    query = {
        "variable": variable,
        "lat": lat,
        "lon": lon,
        "samples": total,
        "valid": valid,
        "cached": cached,
    }
    source = "cache" if cached else "computed"
    logger.info(
        f"✅ Query {source}: {variable} at ({lat}, {lon}), {valid}/{total} valid samples",
        extra={"extra_data": {"query": query}}
    )


# Console-only logging as soon as any module is imported
setup_logging(enable_file_logging=False)
