"""Public error exports for gdindex."""

from __future__ import annotations

from .exceptions import (
    UPSTREAM_ERRORS,
    ApiError,
    AuthError,
    CacheError,
    ConfigurationError,
    GDIndexError,
    HttpErrorInfo,
    InitializationError,
    InvalidArgumentError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    map_http_error,
)

__all__ = [
    "GDIndexError",
    "ConfigurationError",
    "InitializationError",
    "InvalidStateError",
    "CacheError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "UPSTREAM_ERRORS",
    "HttpErrorInfo",
    "map_http_error",
]
