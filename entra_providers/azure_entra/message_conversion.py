"""Translate assistant messages into Chat Completions request messages.

Rules
-----
- A non-empty system prompt becomes a leading ``system`` message.
- Messages keep their order and role; none are dropped.
- A single text block collapses to a plain string; anything else becomes an
  ordered list of ``text`` / ``image_url`` parts.
- Base64 images become ``data:<media_type>;base64,<data>`` URLs, payload
  verbatim. Any other image source raises ``UnsupportedContentError``.

All functions are pure; conversion errors surface before any network call.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Union

from ..base.dto.messages import Base64ImageSource, ImageBlock, TextBlock, parse_content_blocks, parse_messages
from ..base.errors import UnsupportedContentError
from ..config.defaults import AZURE_ENTRA_PROVIDER_NAME

ContentPart = Dict[str, Any]
OpenAIMessage = Dict[str, Any]


def _image_part(block: ImageBlock) -> ContentPart:
    source = block.source
    if not isinstance(source, Base64ImageSource):
        raise UnsupportedContentError(
            message=f"image source type '{source.type}' is not supported; send base64 image data",
            provider=AZURE_ENTRA_PROVIDER_NAME,
            block_type=block.type,
            source_type=source.type,
        )
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{source.media_type};base64,{source.data}"},
    }


def convert_message_content(content: Sequence[Any]) -> Union[str, List[ContentPart]]:
    """Convert content blocks into request content.

    Parameters:
        content: Ordered blocks (``TextBlock``/``ImageBlock`` or raw dicts).

    Returns:
        The raw text for a single text block, otherwise a list of parts.

    Raises:
        UnsupportedContentError: for an image whose source is not base64.
        pydantic.ValidationError: for malformed raw blocks.
    """
    blocks = parse_content_blocks(content)
    if len(blocks) == 1 and isinstance(blocks[0], TextBlock):
        return blocks[0].text

    parts: List[ContentPart] = []
    for block in blocks:
        if isinstance(block, TextBlock):
            parts.append({"type": "text", "text": block.text})
        else:
            parts.append(_image_part(block))
    return parts


def convert_to_openai_messages(system_prompt: str, messages: Sequence[Any]) -> List[OpenAIMessage]:
    """Build the request message list from a system prompt and messages."""
    out: List[OpenAIMessage] = []
    if system_prompt:
        out.append({"role": "system", "content": system_prompt})
    for message in parse_messages(messages):
        out.append({"role": message.role, "content": convert_message_content(message.blocks())})
    return out


__all__ = ["convert_message_content", "convert_to_openai_messages"]
