"""Logging, error sink and query timing for the feedback service."""

from .errors import capture_exception, init_sentry
from .logging import JsonFormatter, RequestIdFilter, configure_logging
from .queries import add_query_logger

__all__ = [
    "JsonFormatter",
    "RequestIdFilter",
    "add_query_logger",
    "capture_exception",
    "configure_logging",
    "init_sentry",
]
