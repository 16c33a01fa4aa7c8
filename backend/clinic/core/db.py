"""
Slow-query alerts for the SQLAlchemy engine.

Statements slower than ``ALERT_QUERY_MS_THRESHOLD`` milliseconds are logged on
the ``sql.alerts`` logger with masked parameters and the current request id,
and counted in the ``clinic_slow_queries_total`` Prometheus counter.
"""

import logging
import os
import time
from typing import Any, Dict, Optional

from flask import g, has_request_context
from prometheus_client import Counter
from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = logging.getLogger("sql.alerts")

SLOW_QUERIES = Counter(
    "clinic_slow_queries_total",
    "Statements slower than the alert threshold",
    ["verb"],
)

# Parameter names whose values never reach the log (patient contact data)
MASKED_PARAM_MARKERS = ("email", "phone", "password", "secret", "token")
DEFAULT_THRESHOLD_MS = 100


def _threshold_ms() -> int:
    try:
        return int(os.getenv("ALERT_QUERY_MS_THRESHOLD", str(DEFAULT_THRESHOLD_MS)))
    except ValueError:
        return DEFAULT_THRESHOLD_MS


def _alerts_enabled() -> bool:
    return os.getenv("ALERT_SLOW_QUERY_ENABLED", "true").lower() == "true"


def _shorten(value: Any, limit: int) -> str:
    text = str(value)
    return text if len(text) <= limit else text[:limit] + "..."


def _mask_params(params: Any) -> Any:
    if isinstance(params, dict):
        return {
            key: "***"
            if any(marker in str(key).lower() for marker in MASKED_PARAM_MARKERS)
            else _mask_params(value)
            for key, value in params.items()
        }
    if isinstance(params, (list, tuple)):
        return [_mask_params(item) for item in params]
    if isinstance(params, bytes):
        return "<binary>"
    return _shorten(params, 200)


def _loggable_params(parameters: Any, context: Any, executemany: bool) -> Any:
    """Masked parameters; positional values are named from the compiled statement."""
    if isinstance(parameters, dict):
        return _mask_params(parameters)
    compiled = getattr(context, "compiled", None)
    names = getattr(compiled, "positiontup", None)
    rows = parameters if executemany else [parameters]
    named = []
    for row in rows:
        if not isinstance(row, (list, tuple)):
            named.append(_mask_params(row))
        elif names and len(names) == len(row):
            named.append(_mask_params(dict(zip(names, row))))
        else:
            named.append(["***"] * len(row))
    return named if executemany else named[0]


def _statement_verb(statement: str) -> str:
    parts = statement.split(None, 1)
    return parts[0].upper() if parts else "UNKNOWN"


def _alert_context(db_info: Dict[str, Any]) -> Dict[str, Any]:
    context = {key: value for key, value in db_info.items() if value}
    if has_request_context():
        for attr in ("request_id", "route"):
            value = getattr(g, attr, None)
            if value:
                context[attr] = value
    return context


def register_query_timing(
    engine: Engine, db_info: Optional[Dict[str, Any]] = None
) -> None:
    """Attach the slow-query listeners to ``engine`` once."""
    if getattr(engine, "_slow_query_alerts_registered", False):
        return

    info = dict(db_info or {})
    if not info:
        info = {"db_host": engine.url.host, "db_name": engine.url.database}

    @event.listens_for(engine, "before_cursor_execute")
    def _start_timer(conn, cursor, statement, parameters, context, executemany):
        context._slow_query_start_time = time.perf_counter()

    @event.listens_for(engine, "after_cursor_execute")
    def _check_duration(conn, cursor, statement, parameters, context, executemany):
        start = getattr(context, "_slow_query_start_time", None)
        if start is None or not _alerts_enabled():
            return
        duration_ms = (time.perf_counter() - start) * 1000.0
        if duration_ms < _threshold_ms():
            return

        verb = _statement_verb(statement or "")
        SLOW_QUERIES.labels(verb=verb).inc()
        logger.warning(
            "Slow query detected",
            extra={
                "context": {
                    "alert_type": "slow_query",
                    "verb": verb,
                    "duration_ms": round(duration_ms, 2),
                    "statement": _shorten(statement or "", 500),
                    "params": _loggable_params(parameters, context, executemany),
                    "context": _alert_context(info),
                }
            },
        )

    engine._slow_query_alerts_registered = True
