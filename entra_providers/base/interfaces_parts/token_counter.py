"""TokenCounter Protocol (single-class module)."""

from __future__ import annotations

from typing import Protocol, Sequence, Union, runtime_checkable

from ..dto.messages import ImageBlock, TextBlock


@runtime_checkable
class TokenCounter(Protocol):
    """Estimates the token count of content blocks.

    ``use_worker`` asks the implementation to keep the event loop free (for
    example by counting in a worker thread); implementations may ignore it.
    """

    async def count_tokens(self, content: Sequence[Union[TextBlock, ImageBlock]], *, use_worker: bool = True) -> int:
        ...
