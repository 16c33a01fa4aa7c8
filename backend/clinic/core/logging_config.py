"""
Structured logging for the clinic backend.

``setup_logging`` installs one console handler (coloured text in development,
JSON lines in production), optional rotating JSON files under ``logs/`` and
request hooks that tag every request with an ``X-Request-ID``. Slow queries
are reported separately by ``clinic.core.db``.

Modules log with ``logging.getLogger(__name__)`` and pass structured fields
through ``extra={"context": {...}}``.
"""

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from flask import Flask, g, request


class JSONFormatter(logging.Formatter):
    """One JSON object per line; ``record.context`` is emitted under "context"."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "context"):
            log_data["context"] = getattr(record, "context", {})

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Coloured level names for local development."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        # Work on a copy so file handlers keep the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname:8}{self.RESET}"
        return super().format(record)


# (filename, minimum level) written under logs/ when LOG_TO_FILE is on
LOG_FILES = (("app.log", logging.NOTSET), ("clinic_errors.log", logging.ERROR))
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _rotating_json_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def _log_to_file_enabled() -> bool:
    return os.getenv("LOG_TO_FILE", "1").strip().lower() in ("1", "true", "yes")


def setup_logging(
    app: Optional[Flask] = None,
    log_level: Union[int, str] = "INFO",
    enable_sql_echo: bool = False,
    log_to_file: Optional[bool] = None,
    use_json_format: bool = False,
) -> None:
    """
    Configure root logging, replacing any handlers already installed.

    Args:
        app: Flask application; when given, request ids and access logs are added
        log_level: Level as an int (logging.INFO) or a name ("INFO")
        enable_sql_echo: Send SQLAlchemy engine statements to the log
        log_to_file: Write rotating JSON files (defaults to LOG_TO_FILE env var)
        use_json_format: JSON console output instead of coloured text
    """
    if isinstance(log_level, int):
        level = log_level
    else:
        level = getattr(logging, str(log_level).upper(), logging.INFO)

    if log_to_file is None:
        log_to_file = _log_to_file_enabled()

    log_dir = Path(__file__).parent.parent.parent / "logs"
    early_warnings = []
    if log_to_file:
        try:
            log_dir.mkdir(exist_ok=True)
        except Exception as e:
            early_warnings.append(
                f"Failed to create logs directory: {e}. Logging will only go to console."
            )
            log_to_file = False

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    if use_json_format:
        console_formatter: logging.Formatter = JSONFormatter()
    else:
        console_formatter = ConsoleFormatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    for msg in early_warnings:
        root_logger.warning(msg, extra={"context": {"component": "logging_setup"}})

    if log_to_file:
        try:
            for filename, handler_level in LOG_FILES:
                root_logger.addHandler(
                    _rotating_json_handler(log_dir / filename, max(level, handler_level))
                )
        except OSError as e:
            root_logger.warning(
                f"Failed to create file handlers: {e}. Falling back to console-only logging.",
                extra={"context": {"component": "logging_setup"}},
            )

    if enable_sql_echo:
        sql_logger = logging.getLogger("sqlalchemy.engine")
        sql_logger.setLevel(logging.INFO)
        sql_logger.propagate = True

    if app is not None:
        _register_request_hooks(app)

    # Suppress noisy third-party loggers
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("xhtml2pdf").setLevel(logging.WARNING)
    logging.getLogger("reportlab").setLevel(logging.WARNING)

    app_logger = logging.getLogger("clinic")
    app_logger.setLevel(level)
    app_logger.info(
        f"Logging configured: level={level}, sql_echo={enable_sql_echo}, "
        f"log_to_file={log_to_file}, json_format={use_json_format}"
    )


# Not written to the request log
QUIET_PATHS = ("/health", "/metrics")


def _register_request_hooks(app: Flask) -> None:
    http_logger = logging.getLogger("clinic.http")

    @app.before_request
    def tag_request():
        g.request_start_time = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        g.route = request.url_rule.rule if request.url_rule is not None else request.path

    @app.after_request
    def log_response(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers["X-Request-ID"] = request_id
        if request.path.startswith(QUIET_PATHS) or "request_start_time" not in g:
            return response

        duration_ms = round((time.perf_counter() - g.request_start_time) * 1000, 2)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        http_logger.log(
            level,
            f"{request.method} {g.route} {response.status_code}",
            extra={
                "context": {
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                    "remote_addr": request.remote_addr,
                }
            },
        )
        return response
