"""Logging utilities for DocumentGen API.

This module provides structured logging with support for both JSON and console output,
request-scoped context information, and exception logging helpers.
"""

import json
import logging
import os
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog

# Context variables for the request being served
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
caller_key_context: ContextVar[Optional[str]] = ContextVar("caller_key", default=None)


def _log4j_formatter(logger: Any, name: str, event_dict: Dict[str, Any]) -> str:
    """Format logs in log4j style: timestamp [level]: message {json_context}"""
    timestamp = event_dict.pop("timestamp", "")
    level = event_dict.pop("level", "info")
    event = event_dict.pop("event", "")
    event_dict.pop("logger", None)

    if event_dict:
        context_json = json.dumps(event_dict, sort_keys=True, separators=(',', ':'), default=str)
        return f"{timestamp} [{level}]: {event} {context_json}"
    return f"{timestamp} [{level}]: {event}"


def _add_system_context(logger: Any, name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add process ID, hostname and the current request context."""
    event_dict["pid"] = os.getpid()
    event_dict["hostname"] = os.uname().nodename

    request_id = request_id_context.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    caller_key = caller_key_context.get()
    if caller_key:
        event_dict.setdefault("caller_key", caller_key)

    return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set the request ID for the current context.

    Args:
        request_id: The request ID to set. If None, generates a new UUID.

    Returns:
        The request ID that was set.
    """
    if request_id is None:
        request_id = str(uuid.uuid4())

    request_id_context.set(request_id)
    return request_id


def get_request_id() -> Optional[str]:
    """Get the current request ID."""
    return request_id_context.get()


def set_caller_key(caller_key: Optional[str]) -> None:
    """Bind the resolved caller key (masked) to the current context."""
    caller_key_context.set(mask_caller_key(caller_key))


def clear_request_context() -> None:
    """Clear request ID and caller key."""
    request_id_context.set(None)
    caller_key_context.set(None)


def configure_logging(log_level: str = "INFO", json_output: bool = True, include_system_context: bool = True) -> None:
    """Configure structured logging with log4j-style formatting.

    Args:
        log_level: The minimum log level to output (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output pure JSON format. If False, use log4j-style format.
        include_system_context: If True, include PID, hostname and request context.
    """
    logging.getLogger().handlers.clear()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    # Suppress noisy third-party library logs
    for noisy in ("httpx", "httpcore", "asyncio", "uvicorn", "uvicorn.access", "uvicorn.error", "redis"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if include_system_context:
        processors.append(_add_system_context)

    processors.append(structlog.processors.UnicodeDecoder())

    if json_output:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True, default=str))
    else:
        processors.append(_log4j_formatter)

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """Get a configured logger with optional initial context.

    Args:
        name: The logger name (typically __name__ or module path)
        **initial_context: Initial context to bind to the logger

    Returns:
        A bound logger instance with the given name and context
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def create_contextual_logger(name: str, **context: Any) -> structlog.stdlib.BoundLogger:
    """Create a logger bound to a service name and any extra context.

    Request ID and caller key are added per event from the context
    variables, so loggers created at construction time still pick them up.
    """
    return get_logger(name, **context)


def log_exception(
    logger: structlog.stdlib.BoundLogger,
    exception: BaseException,
    message: str = "An error occurred",
    **additional_context: Any
) -> None:
    """Log an exception with full context and stack trace.

    Args:
        logger: The logger to use
        exception: The exception that occurred
        message: A descriptive message about the error
        **additional_context: Additional context to include in the log
    """
    context = {
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
        **additional_context
    }

    logger.error(message, exc_info=exception, **context)


def mask_caller_key(caller_key: Optional[str]) -> Optional[str]:
    """Shorten an API key for logs; the anonymous sentinel is left as is."""
    if not caller_key or caller_key == "anonymous" or len(caller_key) <= 4:
        return caller_key
    return f"{caller_key[:4]}***"
