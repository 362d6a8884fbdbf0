"""Content blocks the Chat Completions API cannot accept."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass(kw_only=True)
class UnsupportedContentError(ProviderError):
    """Raised during message conversion for blocks with no request equivalent.

    Currently this is an image whose source is not inline base64 data.

    Attributes:
        block_type: The offending content block type (e.g. ``"image"``).
        source_type: The offending source kind (e.g. ``"url"``), when relevant.
    """

    code: ErrorCode = ErrorCode.UNSUPPORTED
    block_type: Optional[str] = None
    source_type: Optional[str] = None


__all__ = ["UnsupportedContentError"]
