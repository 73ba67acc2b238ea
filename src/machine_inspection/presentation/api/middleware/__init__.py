"""Middleware module for machine inspection API."""

from .logging import RequestResponseLoggingMiddleware, CORRELATION_HEADER

__all__ = [
    "RequestResponseLoggingMiddleware",
    "CORRELATION_HEADER"
]
