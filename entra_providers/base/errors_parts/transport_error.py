"""Completion request or stream failures."""
from __future__ import annotations

from dataclasses import dataclass

from .provider_error import ProviderError


@dataclass
class TransportError(ProviderError):
    """Raised when the chat completion request fails or the stream breaks.

    ``code`` comes from :func:`classify_exception` applied to the SDK error,
    which is kept in ``raw`` and chained as ``__cause__``.
    """


__all__ = ["TransportError"]
