"""Unified provider error taxonomy public surface.

Re-exports the one-class-per-file implementations under
``entra_providers.base.errors_parts``.
"""

from .errors_parts import (
    AuthenticationError,
    ConfigurationError,
    ErrorCode,
    ProviderError,
    TransportError,
    UnsupportedContentError,
    classify_exception,
)

RETRYABLE_CODES = frozenset({ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT, ErrorCode.TIMEOUT, ErrorCode.UNAVAILABLE})

__all__ = [
    "ErrorCode",
    "ProviderError",
    "AuthenticationError",
    "ConfigurationError",
    "TransportError",
    "UnsupportedContentError",
    "classify_exception",
    "RETRYABLE_CODES",
]
