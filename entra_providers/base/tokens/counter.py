"""Default token counter backed by tiktoken.

Counting rules
--------------
- Text blocks are encoded with the ``o200k_base`` encoding.
- Image blocks contribute ``ceil(sqrt(len(data)))`` tokens, where ``data`` is
  the base64 payload (URL images contribute the URL length the same way).
- The sum is multiplied by :data:`TOKEN_FUDGE_FACTOR` and rounded up, so the
  estimate errs on the high side when budgeting a context window.

Fallback semantics
------------------
The encoding is loaded lazily on first use (tiktoken may fetch its BPE file
over the network). If loading fails, a warning is logged once and text is
estimated at one token per four characters, never less than one token for
non-empty text.
"""

from __future__ import annotations

import asyncio
import logging
import math
import threading
from typing import Any, Optional, Sequence, Union

import tiktoken

from ..dto.messages import Base64ImageSource, ImageBlock, TextBlock, parse_content_blocks
from ..logging import get_logger, log_event

DEFAULT_ENCODING = "o200k_base"
TOKEN_FUDGE_FACTOR = 1.5
CHARS_PER_TOKEN = 4


class TiktokenCounter:
    """Token counter implementing the ``TokenCounter`` protocol.

    Attributes:
        encoding_name: tiktoken encoding to load.
    """

    def __init__(self, encoding_name: str = DEFAULT_ENCODING) -> None:
        self.encoding_name = encoding_name
        self._encoding: Optional[Any] = None
        self._encoding_failed = False
        self._lock = threading.Lock()
        self._logger = get_logger("tokens")

    def _get_encoding(self) -> Optional[Any]:
        if self._encoding is not None or self._encoding_failed:
            return self._encoding
        with self._lock:
            if self._encoding is None and not self._encoding_failed:
                try:
                    self._encoding = tiktoken.get_encoding(self.encoding_name)
                except Exception as exc:  # noqa: BLE001 - any load failure degrades to estimation
                    self._encoding_failed = True
                    log_event(
                        self._logger,
                        "tokens.encoding_unavailable",
                        level=logging.WARNING,
                        encoding=self.encoding_name,
                        error=str(exc),
                    )
        return self._encoding

    def _count_text(self, text: str) -> int:
        if not text:
            return 0
        encoding = self._get_encoding()
        if encoding is not None:
            return len(encoding.encode(text, disallowed_special=()))
        return max(1, math.ceil(len(text) / CHARS_PER_TOKEN))

    @staticmethod
    def _count_image(block: ImageBlock) -> int:
        source = block.source
        payload = source.data if isinstance(source, Base64ImageSource) else source.url
        return math.ceil(math.sqrt(len(payload)))

    def count(self, content: Sequence[Union[TextBlock, ImageBlock, Any]]) -> int:
        """Synchronously count ``content`` (typed blocks or raw dicts)."""
        total = 0
        for block in parse_content_blocks(content):
            if isinstance(block, TextBlock):
                total += self._count_text(block.text)
            else:
                total += self._count_image(block)
        return math.ceil(total * TOKEN_FUDGE_FACTOR)

    async def count_tokens(self, content: Sequence[Union[TextBlock, ImageBlock, Any]], *, use_worker: bool = True) -> int:
        """Count ``content``; with ``use_worker`` the work runs in a thread."""
        if use_worker:
            return await asyncio.to_thread(self.count, list(content))
        return self.count(content)


__all__ = ["TiktokenCounter", "DEFAULT_ENCODING", "TOKEN_FUDGE_FACTOR"]
