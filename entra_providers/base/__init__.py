"""
Provider-agnostic base layer.

Exports the contracts, DTOs, stream chunk types, error taxonomy, and the
provider factory used by the Azure Entra ID handler:
- Interfaces: ``ApiHandler`` and ``TokenCounter`` protocols
- DTOs: settings and chat message blocks (Pydantic)
- Streaming: text/usage/error chunks and consumer helpers
- Factory: lazy creation of handlers by canonical name
"""

from .dto import (
    Base64ImageSource,
    ImageBlock,
    MessageParam,
    ProviderSettings,
    TextBlock,
    UrlImageSource,
)
from .errors import (
    AuthenticationError,
    ConfigurationError,
    ErrorCode,
    ProviderError,
    TransportError,
    UnsupportedContentError,
    classify_exception,
)
from .factory import ProviderFactory, UnknownProviderError
from .interfaces import ApiHandler, TokenCounter
from .models import ModelDescriptor, ModelInfo
from .streaming import ErrorChunk, TextChunk, UsageChunk, accumulate_chunks

__all__ = [
    "ProviderSettings",
    "MessageParam",
    "TextBlock",
    "ImageBlock",
    "Base64ImageSource",
    "UrlImageSource",
    "ErrorCode",
    "ProviderError",
    "AuthenticationError",
    "ConfigurationError",
    "TransportError",
    "UnsupportedContentError",
    "classify_exception",
    "ProviderFactory",
    "UnknownProviderError",
    "ApiHandler",
    "TokenCounter",
    "ModelInfo",
    "ModelDescriptor",
    "TextChunk",
    "UsageChunk",
    "ErrorChunk",
    "accumulate_chunks",
]
