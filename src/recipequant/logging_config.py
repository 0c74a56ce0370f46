"""Structured logging configuration for recipequant."""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

# Context variables for the computation being logged
recipe_id_ctx: ContextVar[str | None] = ContextVar("recipe_id", default=None)
ingredient_ctx: ContextVar[str | None] = ContextVar("ingredient", default=None)
computation_id_ctx: ContextVar[str | None] = ContextVar("computation_id", default=None)

_CONTEXT_VARS: dict[str, ContextVar] = {
    "recipe_id": recipe_id_ctx,
    "ingredient": ingredient_ctx,
    "computation_id": computation_id_ctx,
}


def get_context() -> dict[str, str]:
    """Get the context variables that are currently set."""
    return {name: value for name, var in _CONTEXT_VARS.items() if (value := var.get())}


class StructuredJsonFormatter(logging.Formatter):
    """JSON formatter for machine-readable logs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(get_context())

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data["location"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_data)


class ContextualFormatter(logging.Formatter):
    """Human-readable formatter with context for development."""

    def format(self, record: logging.LogRecord) -> str:
        context_parts = []
        if recipe_id := recipe_id_ctx.get():
            context_parts.append(f"recipe={recipe_id}")
        if ingredient := ingredient_ctx.get():
            context_parts.append(f"ingredient={ingredient}")
        if computation_id := computation_id_ctx.get():
            context_parts.append(f"run={computation_id[:8]}")

        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)
        formatted = f"{timestamp} | {level} | {record.name}{context_str} | {record.getMessage()}"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that adds the current context variables to every record."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = kwargs.get("extra", {})
        extra.update(get_context())
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger for the given module name."""
    return ContextLogger(logging.getLogger(name), {})


def configure_logging(
    log_level: str = "INFO",
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure logging for applications embedding the engine.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format for logs. If None, auto-detect from the environment.
        log_file: Optional file path to write logs to.
    """
    if json_format is None:
        json_format = os.getenv("LOG_FORMAT", "").lower() == "json" or (
            not sys.stdout.isatty() and os.getenv("ENVIRONMENT", "development") == "production"
        )

    level_str = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_str, logging.INFO)

    formatter = StructuredJsonFormatter() if json_format else ContextualFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

    # The engine modules are chatty at DEBUG; keep them quieter than the aggregator
    module_levels = {
        "recipequant": level,
        "recipequant.plan": level,
        "recipequant.quantities": max(level, logging.INFO),
        "recipequant.units": max(level, logging.INFO),
    }
    for module_name, module_level in module_levels.items():
        logging.getLogger(module_name).setLevel(module_level)

    logger = get_logger(__name__)
    logger.info(
        f"Logging configured: level={level_str}, format={'json' if json_format else 'text'}"
    )


def set_context(
    recipe_id: str | None = None,
    ingredient: str | None = None,
    computation_id: str | None = None,
) -> None:
    """Set logging context variables."""
    if recipe_id is not None:
        recipe_id_ctx.set(recipe_id)
    if ingredient is not None:
        ingredient_ctx.set(ingredient)
    if computation_id is not None:
        computation_id_ctx.set(computation_id)


def clear_context() -> None:
    """Clear all logging context variables."""
    for var in _CONTEXT_VARS.values():
        var.set(None)


class LoggingContext:
    """Context manager for setting logging context."""

    def __init__(
        self,
        recipe_id: str | None = None,
        ingredient: str | None = None,
        computation_id: str | None = None,
    ):
        self._values = {
            "recipe_id": recipe_id,
            "ingredient": ingredient,
            "computation_id": computation_id,
        }
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> "LoggingContext":
        for name, value in self._values.items():
            if value is not None:
                self._tokens[name] = _CONTEXT_VARS[name].set(value)
        return self

    def __exit__(self, *args: Any) -> None:
        for name, token in self._tokens.items():
            _CONTEXT_VARS[name].reset(token)
        self._tokens.clear()
