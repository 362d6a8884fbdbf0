"""ApiHandler Protocol (single-class module).

The uniform surface the assistant drives: stream a reply, report the model,
count tokens. Adapters never leak SDK objects through it.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from ..models import ModelDescriptor
from ..streaming import ApiStream


@runtime_checkable
class ApiHandler(Protocol):
    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g. ``"azure-openai-entra"``."""
        ...

    def create_message(self, system_prompt: str, messages: Sequence[Any]) -> ApiStream:
        """Return an async iterator of text chunks ending with one usage chunk.

        Failures raise :class:`~entra_providers.base.errors.ProviderError`
        subclasses; no error chunk is yielded.
        """
        ...

    def get_model(self) -> ModelDescriptor:
        ...

    async def count_tokens(self, content: Sequence[Any]) -> int:
        ...
