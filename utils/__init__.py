"""Utility modules for DocumentGen API."""

from .datetime import month_key, next_minute_epoch, start_of_month, start_of_next_month, utc_now
from .logging import (
    clear_request_context,
    configure_logging,
    create_contextual_logger,
    get_logger,
    get_request_id,
    log_exception,
    mask_caller_key,
    set_caller_key,
    set_request_id,
)

__all__ = [
    "clear_request_context",
    "configure_logging",
    "create_contextual_logger",
    "get_logger",
    "get_request_id",
    "log_exception",
    "mask_caller_key",
    "month_key",
    "next_minute_epoch",
    "set_caller_key",
    "set_request_id",
    "start_of_month",
    "start_of_next_month",
    "utc_now",
]
