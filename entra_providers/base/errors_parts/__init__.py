"""Errors parts package public surface.

Prefer importing from ``entra_providers.base.errors`` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .authentication_error import AuthenticationError
from .configuration_error import ConfigurationError
from .transport_error import TransportError
from .unsupported_content_error import UnsupportedContentError
from .classification import classify_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "AuthenticationError",
    "ConfigurationError",
    "TransportError",
    "UnsupportedContentError",
    "classify_exception",
]
