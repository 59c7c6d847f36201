# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - CLUSTER CARE
# STATUS: Core - Structured logging with pass context
# PURPOSE: Correlate evaluator log lines with their pass, aspect and target
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Every record emitted during a pass carries the fields of the enclosing
log_context() blocks:

    pass_id    set by HealthOrchestrator.run_pass
    aspect     set per aspect evaluation
    resource   set per sub-resource in ResourceConditionEvaluator
    instance   set per referenced Prometheus in AlertQueryEvaluator

Context lives in a ContextVar. asyncio copies it into every task the
executor starts, so concurrent aspects never see each other's fields.

Hosts call configure_logging() once at startup; the library itself only
creates loggers.

Usage:
    from core.logging import ComponentType, get_logger, log_context

    logger = get_logger(__name__, ComponentType.EVALUATOR)

    with log_context(resource="garden/vpa"):
        logger.debug("Checking resource")
"""

import contextvars
import json
import logging
import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


class ComponentType(str, Enum):
    """Which part of the engine emitted a record."""
    ORCHESTRATOR = "orchestrator"
    EVALUATOR = "evaluator"
    MONITORING = "monitoring"


# Rendered inline by HumanFormatter, in this order
INLINE_FIELDS = (
    ("pass_id", "pass"),
    ("aspect", "aspect"),
    ("resource", "resource"),
    ("instance", "instance"),
)


@dataclass(frozen=True)
class LogContext:
    """Fields attached to records emitted inside a log_context() block."""
    pass_id: Optional[str] = None
    aspect: Optional[str] = None
    resource: Optional[str] = None
    instance: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only; extra keys are flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


_NAMED_FIELDS = frozenset(f.name for f in fields(LogContext)) - {"extra"}

_current_context: contextvars.ContextVar = contextvars.ContextVar(
    "care_log_context", default=LogContext()
)


def get_current_context() -> LogContext:
    return _current_context.get()


@contextmanager
def log_context(**kwargs):
    """
    Add fields to the log context for the duration of the block.

    Named LogContext fields replace the parent's value; any other keyword
    is merged into extra.

    Example:
        with log_context(aspect="SystemComponentsHealthy"):
            logger.info("Evaluating aspect")
    """
    parent = get_current_context()
    named = {k: v for k, v in kwargs.items() if k in _NAMED_FIELDS}
    other = {k: v for k, v in kwargs.items() if k not in _NAMED_FIELDS}
    token = _current_context.set(replace(parent, extra={**parent.extra, **other}, **named))
    try:
        yield _current_context.get()
    finally:
        _current_context.reset(token)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        data = getattr(record, "extra", None) or {}
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if data.get("component"):
            entry["component"] = data["component"]

        context = get_current_context().to_dict()
        if context:
            entry["context"] = context

        payload = {k: v for k, v in data.items() if k != "component" and k not in context}
        if payload:
            entry["data"] = payload

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line output for local runs: context fields go in brackets."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        context = get_current_context()
        parts = [
            f"{label}={getattr(context, name)}"
            for name, label in INLINE_FIELDS
            if getattr(context, name)
        ]
        context_str = f" [{', '.join(parts)}]" if parts else ""

        line = f"{timestamp} {record.levelname.ljust(8)} {record.name}{context_str}: {record.getMessage()}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


class ContextLogger(logging.LoggerAdapter):
    """
    Copies the current log context and the logger's component onto each
    record, as record.extra.
    """

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra", {}))
        extra.update(get_current_context().to_dict())
        if self.extra.get("component"):
            extra.setdefault("component", self.extra["component"])
        kwargs["extra"] = {"extra": extra}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """Context-aware logger for a module, tagged with its component."""
    return ContextLogger(
        logging.getLogger(name),
        {"component": component.value if component else None},
    )


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
) -> None:
    """
    Replace the root handlers with one stdout handler.

    Args:
        level: Log level name or number
        json_output: JSON lines instead of human output; also enabled by
            LOG_FORMAT=json
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = HumanFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


# ============================================================================
# CHECKPOINTS
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a named pass milestone (e.g. "care_pass_completed") at info.

    The current context is included, so a checkpoint can be joined with
    every other record of the same pass_id.
    """
    payload: Dict[str, Any] = {"checkpoint": name, **get_current_context().to_dict()}
    if data:
        payload["data"] = data
    (logger or logging.getLogger("checkpoint")).info(
        f"CHECKPOINT: {name}", extra={"extra": payload},
    )


__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
