"""In-memory fakes for the Azure identity credential and the OpenAI client."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

FAKE_BEARER = "fake-bearer-value"
TENANT_ID = "0a1b2c3d-0000-4000-8000-00000000aaaa"
CLIENT_ID = "9f8e7d6c-0000-4000-8000-00000000bbbb"
CLIENT_SECRET = "s3cr3t-Value~shhh"  # pragma: allowlist secret - fake credential
BASE_URL = "https://my-resource.openai.azure.com/"


def delta_event(content: Optional[str]) -> SimpleNamespace:
    """Build a stream event shaped like a Chat Completions chunk."""
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class FakeCredential:
    """Stands in for ``azure.identity.aio.ClientSecretCredential``."""

    def __init__(self, tenant_id: str, client_id: str, client_secret: str, *, error: Optional[BaseException] = None) -> None:
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.error = error
        self.scopes: List[tuple] = []
        self.closed = False

    async def get_token(self, *scopes: str) -> SimpleNamespace:
        self.scopes.append(scopes)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(token=FAKE_BEARER, expires_on=4102444800)

    async def close(self) -> None:
        self.closed = True


async def _event_stream(events: List[Any], error: Optional[BaseException]):
    for ev in events:
        yield ev
    if error is not None:
        raise error


class FakeAzureOpenAI:
    """Stands in for ``openai.AsyncAzureOpenAI`` and records requests."""

    def __init__(self, transport: "FakeTransport", **kwargs: Any) -> None:
        self.kwargs = kwargs
        self.closed = False
        self._transport = transport
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    async def _create(self, **params: Any):
        self._transport.calls.append(params)
        if self._transport.create_error is not None:
            raise self._transport.create_error
        return _event_stream(list(self._transport.events), self._transport.stream_error)

    async def close(self) -> None:
        self.closed = True


@dataclass
class FakeTransport:
    """Scripted behavior plus a record of everything the handler built."""

    events: List[Any] = field(default_factory=list)
    create_error: Optional[BaseException] = None
    stream_error: Optional[BaseException] = None
    token_error: Optional[BaseException] = None
    calls: List[Dict[str, Any]] = field(default_factory=list)
    clients: List[FakeAzureOpenAI] = field(default_factory=list)
    credentials: List[FakeCredential] = field(default_factory=list)


class ListHandler(logging.Handler):
    """Capture log messages into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())
