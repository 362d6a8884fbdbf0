"""Validated DTOs at the adapter boundary (settings and chat messages)."""

from .messages import (
    Base64ImageSource,
    ContentBlock,
    ImageBlock,
    ImageSource,
    MessageParam,
    Role,
    TextBlock,
    UrlImageSource,
    parse_content_blocks,
    parse_messages,
)
from .provider_settings import ProviderSettings

__all__ = [
    "ProviderSettings",
    "MessageParam",
    "Role",
    "ContentBlock",
    "TextBlock",
    "ImageBlock",
    "ImageSource",
    "Base64ImageSource",
    "UrlImageSource",
    "parse_content_blocks",
    "parse_messages",
]
