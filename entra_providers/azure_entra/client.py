"""Azure OpenAI chat handler authenticated with Microsoft Entra ID.

Purpose:
- Stream chat completions from an Azure OpenAI deployment using a service
  principal (tenant id, client id, client secret) instead of an API key.

External dependencies:
- ``openai.AsyncAzureOpenAI`` for the Chat Completions transport.
- ``azure-identity`` (see ``credentials.py``) for bearer tokens.

Client lifecycle:
- The SDK client is built on first use and memoized. Concurrent first calls
  share one build behind an ``asyncio.Lock``.
- Configuration is validated and one token is fetched while building, so a
  bad setup fails at first use rather than mid-request.

Failure semantics:
- ``create_message`` raises; it never yields an error chunk. SDK failures
  become ``TransportError`` with a classified code. Configuration,
  authentication and content errors propagate as raised.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from openai import AsyncAzureOpenAI, AsyncStream

from ..base.dto.provider_settings import ProviderSettings
from ..base.errors import (
    ConfigurationError,
    ErrorCode,
    ProviderError,
    RETRYABLE_CODES,
    TransportError,
    classify_exception,
)
from ..base.interfaces import TokenCounter
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import ModelDescriptor
from ..base.streaming import ApiStream, TextChunk, UsageChunk
from ..base.tokens import TiktokenCounter
from ..config.defaults import (
    AZURE_ENTRA_PROVIDER_NAME,
    AZURE_OPENAI_DEFAULT_API_VERSION,
    AZURE_OPENAI_DEFAULT_DEPLOYMENT,
    AZURE_OPENAI_DEFAULT_TEMPERATURE,
)
from .credentials import EntraTokenProvider, build_credential
from .message_conversion import convert_message_content, convert_to_openai_messages
from .models import resolve_model


class AzureOpenAIEntraHandler:
    """Streaming chat handler for one Azure OpenAI deployment.

    Parameters:
        settings: ``ProviderSettings`` or a mapping of settings keys
            (snake_case or camelCase). A default temperature is written into
            the settings object when it leaves temperature unset.
        token_counter: Optional counter used by :meth:`count_tokens`;
            defaults to :class:`TiktokenCounter`.
    """

    def __init__(
        self,
        settings: Union[ProviderSettings, Mapping[str, Any]],
        *,
        token_counter: Optional[TokenCounter] = None,
    ) -> None:
        if not isinstance(settings, ProviderSettings):
            settings = ProviderSettings.model_validate(dict(settings))
        if settings.model_temperature is None:
            settings.model_temperature = AZURE_OPENAI_DEFAULT_TEMPERATURE
        self._settings = settings
        self._deployment = settings.azure_openai_deployment_name or AZURE_OPENAI_DEFAULT_DEPLOYMENT
        self._model = resolve_model(self._deployment)
        self._token_counter: TokenCounter = token_counter or TiktokenCounter()

        self._client: Optional[AsyncAzureOpenAI] = None
        self._token_provider: Optional[EntraTokenProvider] = None
        self._client_lock = asyncio.Lock()
        self._logger = get_logger("providers.azure_entra")
        self._ctx = LogContext(
            provider=AZURE_ENTRA_PROVIDER_NAME,
            model=self._deployment,
            endpoint=settings.azure_openai_base_url,
        )

    @property
    def provider_name(self) -> str:
        """Return the canonical provider name."""
        return AZURE_ENTRA_PROVIDER_NAME

    @property
    def settings(self) -> ProviderSettings:
        return self._settings

    # ----- client lifecycle -----

    async def get_client(self) -> AsyncAzureOpenAI:
        """Return the memoized SDK client, building it on first use.

        Raises:
            ConfigurationError: endpoint or Entra ID credentials are missing.
            AuthenticationError: the identity provider rejected the credentials.
        """
        if self._client is not None:
            return self._client
        async with self._client_lock:
            if self._client is None:
                self._client = await self._build_client()
        return self._client

    async def _build_client(self) -> AsyncAzureOpenAI:
        settings = self._settings
        missing = settings.missing_required()
        if missing:
            normalized_log_event(
                self._logger,
                "client.init",
                self._ctx,
                phase="init",
                error_code=ErrorCode.AUTH.value,
                emitted=False,
                missing=list(missing),
            )
            raise ConfigurationError(
                message=(
                    "Azure OpenAI Entra ID configuration is incomplete; "
                    f"missing: {', '.join(missing)}"
                ),
                provider=AZURE_ENTRA_PROVIDER_NAME,
                model=self._deployment,
                missing=missing,
            )

        token_provider = EntraTokenProvider(
            build_credential(settings, model=self._deployment),
            tenant_id=settings.azure_ad_tenant_id,
            client_id=settings.azure_ad_client_id,
            ctx=self._ctx,
        )
        try:
            await token_provider()
        except BaseException:
            await token_provider.close()
            raise

        api_version = settings.azure_openai_api_version or AZURE_OPENAI_DEFAULT_API_VERSION
        client = AsyncAzureOpenAI(
            azure_ad_token_provider=token_provider,
            api_version=api_version,
            azure_endpoint=settings.azure_openai_base_url,
            azure_deployment=self._deployment,
        )
        self._token_provider = token_provider
        normalized_log_event(
            self._logger,
            "client.init",
            self._ctx,
            phase="init",
            emitted=True,
            api_version=api_version,
            tenant_id=settings.azure_ad_tenant_id,
            client_id=settings.azure_ad_client_id,
        )
        return client

    async def close(self) -> None:
        """Release the SDK client and credential; a later call rebuilds them."""
        async with self._client_lock:
            client, self._client = self._client, None
            token_provider, self._token_provider = self._token_provider, None
        if client is not None:
            await client.close()
        if token_provider is not None:
            await token_provider.close()

    async def __aenter__(self) -> "AzureOpenAIEntraHandler":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ----- message conversion -----

    def convert_to_openai_messages(self, system_prompt: str, messages: Sequence[Any]) -> List[Dict[str, Any]]:
        return convert_to_openai_messages(system_prompt, messages)

    def convert_message_content(self, content: Sequence[Any]) -> Union[str, List[Dict[str, Any]]]:
        return convert_message_content(content)

    # ----- streaming -----

    def _build_stream_params(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "model": self._deployment,
            "messages": messages,
            "stream": True,
            "max_completion_tokens": self._model.info.max_tokens,
            "temperature": self._settings.model_temperature,
        }

    @staticmethod
    def _translate_delta(chunk: Any) -> Optional[str]:
        """Return the text delta carried by a stream event, if any."""
        try:
            content = chunk.choices[0].delta.content
        except (AttributeError, IndexError, TypeError):
            return None
        return content if isinstance(content, str) and content else None

    async def create_message(self, system_prompt: str, messages: Sequence[Any]) -> ApiStream:
        """Stream the assistant reply as text chunks followed by one usage chunk.

        Raises:
            UnsupportedContentError: a message holds a non-base64 image.
            ConfigurationError / AuthenticationError: from :meth:`get_client`.
            TransportError: the request or the stream failed. Chunks already
                yielded stay delivered; no usage chunk follows.
        """
        openai_messages = convert_to_openai_messages(system_prompt, messages)
        client = await self.get_client()
        params = self._build_stream_params(openai_messages)
        normalized_log_event(
            self._logger,
            "stream.start",
            self._ctx,
            phase="start",
            attempt=1,
            emitted=None,
            tokens=None,
            temperature=params["temperature"],
            max_tokens=params["max_completion_tokens"],
            messages=len(openai_messages),
        )

        emitted = 0
        stream = None
        try:
            stream = await client.chat.completions.create(**params)
            async for event in stream:
                text = self._translate_delta(event)
                if text is None:
                    continue
                emitted += 1
                yield TextChunk(text=text)
        except ProviderError as e:
            self._log_stream_error(e.code.value, emitted, e)
            raise
        except Exception as e:  # noqa: BLE001 - every SDK failure is reclassified
            code = classify_exception(e)
            self._log_stream_error(code.value, emitted, e)
            raise TransportError(
                code=code,
                message=str(e) or type(e).__name__,
                provider=AZURE_ENTRA_PROVIDER_NAME,
                model=self._deployment,
                retryable=code in RETRYABLE_CODES,
                raw=e,
            ) from e
        finally:
            if isinstance(stream, AsyncStream):
                await stream.close()

        normalized_log_event(
            self._logger,
            "stream.end",
            self._ctx,
            phase="finalize",
            attempt=1,
            emitted=emitted > 0,
            tokens=None,
            chunks=emitted,
        )
        yield UsageChunk(input_tokens=0, output_tokens=0, total_cost=0.0)

    def _log_stream_error(self, code: str, emitted: int, exc: BaseException) -> None:
        normalized_log_event(
            self._logger,
            "stream.error",
            self._ctx,
            phase="mid_stream" if emitted else "start",
            attempt=1,
            error_code=code,
            emitted=emitted > 0,
            tokens=None,
            chunks=emitted,
            error_type=type(exc).__name__,
        )

    # ----- model & tokens -----

    def get_model(self) -> ModelDescriptor:
        """Return the deployment's model descriptor."""
        return self._model

    async def count_tokens(self, content: Sequence[Any]) -> int:
        """Count ``content`` with the configured token counter (worker thread)."""
        return await self._token_counter.count_tokens(content, use_worker=True)


__all__ = ["AzureOpenAIEntraHandler"]
