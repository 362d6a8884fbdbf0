"""
Pydantic DTOs for the chat messages the assistant hands to the adapter.

Purpose
-------
Model the assistant's internal message shape (Anthropic-style content blocks)
as a validated tagged union so conversion code can match exhaustively on
block and source types instead of probing dictionaries.

External dependencies: Pydantic only. No I/O.

Failure semantics: parsing raw dictionaries either succeeds or raises
``pydantic.ValidationError``; unknown block types are rejected at this edge.
Extra keys (for example ``cache_control``) are ignored.
"""

from __future__ import annotations

from typing import Annotated, Any, Iterable, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Block(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Base64ImageSource(_Block):
    """Inline image payload; ``data`` is the base64 text, kept verbatim."""

    type: Literal["base64"] = "base64"
    media_type: str = Field(..., min_length=1)
    data: str


class UrlImageSource(_Block):
    """Image referenced by URL. Not accepted by the adapter's request path."""

    type: Literal["url"] = "url"
    url: str


ImageSource = Annotated[Union[Base64ImageSource, UrlImageSource], Field(discriminator="type")]


class TextBlock(_Block):
    type: Literal["text"] = "text"
    text: str


class ImageBlock(_Block):
    type: Literal["image"] = "image"
    source: ImageSource


ContentBlock = Annotated[Union[TextBlock, ImageBlock], Field(discriminator="type")]

Role = Literal["system", "user", "assistant"]


class MessageParam(_Block):
    """A chat message: a role plus a string or an ordered list of blocks."""

    role: Role
    content: Union[str, List[ContentBlock]]

    def blocks(self) -> List[Union[TextBlock, ImageBlock]]:
        """Return the content as blocks; a plain string becomes one text block."""
        if isinstance(self.content, str):
            return [TextBlock(text=self.content)]
        return list(self.content)


_BLOCK_ADAPTER: TypeAdapter[ContentBlock] = TypeAdapter(ContentBlock)


def parse_content_blocks(raw: Iterable[Any]) -> List[Union[TextBlock, ImageBlock]]:
    """Validate an iterable of dicts and/or block models into typed blocks."""
    return [b if isinstance(b, (TextBlock, ImageBlock)) else _BLOCK_ADAPTER.validate_python(b) for b in raw]


def parse_messages(raw: Iterable[Any]) -> List[MessageParam]:
    """Validate an iterable of dicts and/or ``MessageParam`` into messages."""
    return [m if isinstance(m, MessageParam) else MessageParam.model_validate(m) for m in raw]


__all__ = [
    "Base64ImageSource",
    "UrlImageSource",
    "ImageSource",
    "TextBlock",
    "ImageBlock",
    "ContentBlock",
    "Role",
    "MessageParam",
    "parse_content_blocks",
    "parse_messages",
]
