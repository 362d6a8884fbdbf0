"""Behavioral tests for AzureOpenAIEntraHandler with fake SDK clients."""

from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace

import httpx
import openai
import pytest
from azure.core.exceptions import ClientAuthenticationError

from entra_providers.azure_entra import AzureOpenAIEntraHandler
from entra_providers.base.dto import ProviderSettings
from entra_providers.base.errors import (
    AuthenticationError,
    ConfigurationError,
    ErrorCode,
    ProviderError,
    TransportError,
    UnsupportedContentError,
)
from entra_providers.base.interfaces import ApiHandler
from entra_providers.base.streaming import TextChunk, UsageChunk
from entra_providers.config.defaults import AZURE_COGNITIVE_SERVICES_SCOPE
from entra_providers.tests.helpers import (
    BASE_URL,
    CLIENT_ID,
    CLIENT_SECRET,
    FAKE_BEARER,
    TENANT_ID,
    delta_event,
)

USER_HELLO = [{"role": "user", "content": "Hello"}]


async def _collect(handler, system_prompt="You are helpful.", messages=USER_HELLO):
    return [chunk async for chunk in handler.create_message(system_prompt, messages)]


# ----- construction -----


def test_default_temperature_written_into_settings(settings):
    assert settings.model_temperature is None  # nosec B101
    AzureOpenAIEntraHandler(settings)
    assert settings.model_temperature == 0.3  # nosec B101


@pytest.mark.parametrize("explicit", [0.0, 0.7, 2.0])
def test_explicit_temperature_is_kept(settings, explicit):
    settings.model_temperature = explicit
    AzureOpenAIEntraHandler(settings)
    assert settings.model_temperature == explicit  # nosec B101


def test_accepts_camel_case_mapping():
    handler = AzureOpenAIEntraHandler(
        {
            "azureOpenAiBaseUrl": BASE_URL,
            "azureOpenAiDeploymentName": "gpt-4o-mini",
            "modelTemperature": 1.1,
        }
    )
    assert handler.get_model().id == "gpt-4o-mini"  # nosec B101
    assert handler.settings.model_temperature == 1.1  # nosec B101


def test_satisfies_api_handler_protocol(settings):
    handler = AzureOpenAIEntraHandler(settings)
    assert isinstance(handler, ApiHandler)  # nosec B101
    assert handler.provider_name == "azure-openai-entra"  # nosec B101


def test_construction_performs_no_io(settings, transport):
    AzureOpenAIEntraHandler(settings)
    assert transport.credentials == []  # nosec B101
    assert transport.clients == []  # nosec B101


# ----- model resolution -----


def test_get_model_known_deployment(settings):
    model = AzureOpenAIEntraHandler(settings).get_model()
    assert model.id == "gpt-4o"  # nosec B101
    assert model.info.max_tokens == 4096  # nosec B101
    assert model.info.context_window == 128_000  # nosec B101
    assert model.info.supports_images is True  # nosec B101


def test_get_model_defaults_to_gpt4_when_deployment_unset(settings):
    settings.azure_openai_deployment_name = None
    model = AzureOpenAIEntraHandler(settings).get_model()
    assert model.id == "gpt-4"  # nosec B101
    assert model.info.max_tokens == 8192  # nosec B101
    assert model.info.context_window == 8192  # nosec B101


def test_get_model_unknown_deployment_falls_back(settings):
    settings.azure_openai_deployment_name = "my-custom-deployment"
    model = AzureOpenAIEntraHandler(settings).get_model()
    assert model.id == "my-custom-deployment"  # nosec B101
    assert model.info.max_tokens == 4096  # nosec B101
    assert model.info.context_window == 128_000  # nosec B101
    assert model.info.supports_images is False  # nosec B101
    assert model.info.input_price == 0.01  # nosec B101
    assert model.info.output_price == 0.03  # nosec B101
    assert "my-custom-deployment" in model.info.description  # nosec B101
    assert "Entra ID" in model.info.description  # nosec B101


# ----- client acquisition -----


async def test_get_client_builds_credential_and_client(settings, transport):
    handler = AzureOpenAIEntraHandler(settings)
    client = await handler.get_client()

    assert len(transport.credentials) == 1  # nosec B101
    cred = transport.credentials[0]
    assert (cred.tenant_id, cred.client_id, cred.client_secret) == (TENANT_ID, CLIENT_ID, CLIENT_SECRET)  # nosec B101
    assert cred.scopes == [(AZURE_COGNITIVE_SERVICES_SCOPE,)]  # nosec B101

    assert client is transport.clients[0]  # nosec B101
    assert client.kwargs["azure_endpoint"] == BASE_URL  # nosec B101
    assert client.kwargs["azure_deployment"] == "gpt-4o"  # nosec B101
    assert client.kwargs["api_version"] == "2024-02-01"  # nosec B101
    assert "api_key" not in client.kwargs  # nosec B101


async def test_token_provider_requests_scope_on_each_call(settings, transport):
    handler = AzureOpenAIEntraHandler(settings)
    client = await handler.get_client()
    token_provider = client.kwargs["azure_ad_token_provider"]

    assert await token_provider() == FAKE_BEARER  # nosec B101
    assert await token_provider() == FAKE_BEARER  # nosec B101
    assert transport.credentials[0].scopes == [(AZURE_COGNITIVE_SERVICES_SCOPE,)] * 3  # nosec B101


async def test_explicit_api_version_is_used(settings, transport):
    settings.azure_openai_api_version = "2024-10-21"
    client = await AzureOpenAIEntraHandler(settings).get_client()
    assert client.kwargs["api_version"] == "2024-10-21"  # nosec B101


async def test_get_client_is_memoized(settings, transport):
    handler = AzureOpenAIEntraHandler(settings)
    first = await handler.get_client()
    second = await handler.get_client()
    assert first is second  # nosec B101
    assert len(transport.clients) == 1  # nosec B101
    assert len(transport.credentials) == 1  # nosec B101


async def test_concurrent_first_use_builds_one_client(settings, transport):
    handler = AzureOpenAIEntraHandler(settings)
    clients = await asyncio.gather(*(handler.get_client() for _ in range(8)))
    assert all(c is clients[0] for c in clients)  # nosec B101
    assert len(transport.clients) == 1  # nosec B101
    assert len(transport.credentials) == 1  # nosec B101


async def test_missing_configuration_raises_before_any_token_request(transport):
    handler = AzureOpenAIEntraHandler(ProviderSettings(azure_openai_base_url=BASE_URL, azure_ad_tenant_id=TENANT_ID))
    with pytest.raises(ConfigurationError) as excinfo:
        await handler.get_client()

    err = excinfo.value
    assert isinstance(err, AuthenticationError)  # nosec B101
    assert err.code is ErrorCode.AUTH  # nosec B101
    assert err.missing == ("azureADClientId", "azureADClientSecret")  # nosec B101
    assert "azureADClientSecret" in err.message  # nosec B101
    assert transport.credentials == []  # nosec B101
    assert transport.clients == []  # nosec B101


async def test_missing_endpoint_is_reported(settings, transport):
    settings.azure_openai_base_url = "  "
    with pytest.raises(ConfigurationError) as excinfo:
        await AzureOpenAIEntraHandler(settings).get_client()
    assert excinfo.value.missing == ("azureOpenAiBaseUrl",)  # nosec B101


async def test_rejected_credentials_raise_authentication_error(settings, transport):
    transport.token_error = ClientAuthenticationError(message="AADSTS7000215: Invalid client secret provided.")
    handler = AzureOpenAIEntraHandler(settings)

    with pytest.raises(AuthenticationError) as excinfo:
        await handler.get_client()

    err = excinfo.value
    assert not isinstance(err, ConfigurationError)  # nosec B101
    assert err.code is ErrorCode.AUTH  # nosec B101
    assert TENANT_ID in err.message  # nosec B101
    assert CLIENT_ID in err.message  # nosec B101
    assert CLIENT_SECRET not in err.message  # nosec B101
    assert CLIENT_SECRET not in str(err)  # nosec B101
    assert err.__cause__ is transport.token_error  # nosec B101
    assert transport.credentials[0].closed is True  # nosec B101
    assert transport.clients == []  # nosec B101


async def test_unexpected_token_failure_closes_credential(settings, transport):
    transport.token_error = RuntimeError("boom")
    handler = AzureOpenAIEntraHandler(settings)

    with pytest.raises(AuthenticationError) as excinfo:
        await handler.get_client()

    assert excinfo.value.code is ErrorCode.AUTH  # nosec B101
    assert "boom" in excinfo.value.message  # nosec B101
    assert excinfo.value.__cause__ is transport.token_error  # nosec B101
    assert transport.credentials[0].closed is True  # nosec B101
    assert transport.clients == []  # nosec B101


async def test_token_timeout_keeps_retryable_code(settings, transport):
    transport.token_error = TimeoutError("token endpoint timed out")
    with pytest.raises(AuthenticationError) as excinfo:
        await AzureOpenAIEntraHandler(settings).get_client()
    assert excinfo.value.code is ErrorCode.TIMEOUT  # nosec B101
    assert excinfo.value.retryable is True  # nosec B101
    assert transport.credentials[0].closed is True  # nosec B101


async def test_cancelled_token_fetch_closes_credential(settings, transport):
    transport.token_error = asyncio.CancelledError()
    with pytest.raises(asyncio.CancelledError):
        await AzureOpenAIEntraHandler(settings).get_client()
    assert transport.credentials[0].closed is True  # nosec B101


async def test_malformed_tenant_raises_authentication_error(settings):
    settings.azure_ad_tenant_id = "bad tenant!"
    handler = AzureOpenAIEntraHandler(settings)

    with pytest.raises(AuthenticationError) as excinfo:
        await handler.get_client()

    err = excinfo.value
    assert err.code is ErrorCode.AUTH  # nosec B101
    assert "bad tenant!" in err.message  # nosec B101
    assert CLIENT_ID in err.message  # nosec B101
    assert CLIENT_SECRET not in str(err)  # nosec B101
    assert isinstance(err.__cause__, ValueError)  # nosec B101


async def test_malformed_tenant_propagates_from_stream(settings):
    settings.azure_ad_tenant_id = "bad tenant!"
    with pytest.raises(AuthenticationError) as excinfo:
        await _collect(AzureOpenAIEntraHandler(settings))
    assert not isinstance(excinfo.value, TransportError)  # nosec B101


async def test_failed_build_is_retried_on_next_call(settings, transport):
    transport.token_error = ClientAuthenticationError(message="AADSTS700016: Application not found.")
    handler = AzureOpenAIEntraHandler(settings)
    with pytest.raises(AuthenticationError):
        await handler.get_client()

    transport.token_error = None
    client = await handler.get_client()
    assert client is transport.clients[0]  # nosec B101
    assert len(transport.credentials) == 2  # nosec B101


async def test_close_releases_client_and_credential(settings, transport):
    async with AzureOpenAIEntraHandler(settings) as handler:
        await handler.get_client()
    assert transport.clients[0].closed is True  # nosec B101
    assert transport.credentials[0].closed is True  # nosec B101


# ----- streaming -----


async def test_stream_yields_text_then_single_usage(settings, transport):
    transport.events = [delta_event("Hello"), delta_event(" world")]
    chunks = await _collect(AzureOpenAIEntraHandler(settings))
    assert chunks == [  # nosec B101
        TextChunk(text="Hello"),
        TextChunk(text=" world"),
        UsageChunk(input_tokens=0, output_tokens=0, total_cost=0.0),
    ]


async def test_stream_skips_events_without_content(settings, transport):
    transport.events = [
        delta_event(None),
        delta_event(""),
        delta_event("only"),
        SimpleNamespace(choices=[]),
    ]
    chunks = await _collect(AzureOpenAIEntraHandler(settings))
    assert chunks == [TextChunk(text="only"), UsageChunk(0, 0, 0.0)]  # nosec B101


async def test_empty_stream_yields_only_usage(settings, transport):
    chunks = await _collect(AzureOpenAIEntraHandler(settings))
    assert chunks == [UsageChunk(0, 0, 0.0)]  # nosec B101


async def test_request_parameters(settings, transport):
    settings.model_temperature = 0.0
    transport.events = [delta_event("ok")]
    await _collect(AzureOpenAIEntraHandler(settings))

    assert transport.calls == [  # nosec B101
        {
            "model": "gpt-4o",
            "messages": [
                {"role": "system", "content": "You are helpful."},
                {"role": "user", "content": "Hello"},
            ],
            "stream": True,
            "max_completion_tokens": 4096,
            "temperature": 0.0,
        }
    ]


async def test_request_rejection_raises_without_chunks(settings, transport):
    transport.create_error = Exception("API Error")
    handler = AzureOpenAIEntraHandler(settings)

    chunks = []
    with pytest.raises(TransportError, match="API Error") as excinfo:
        async for chunk in handler.create_message("You are helpful.", USER_HELLO):
            chunks.append(chunk)

    assert chunks == []  # nosec B101
    err = excinfo.value
    assert err.message == "API Error"  # nosec B101
    assert err.code is ErrorCode.UNKNOWN  # nosec B101
    assert err.provider == "azure-openai-entra"  # nosec B101
    assert err.model == "gpt-4o"  # nosec B101
    assert err.raw is transport.create_error  # nosec B101
    assert err.__cause__ is transport.create_error  # nosec B101


async def test_mid_stream_failure_keeps_delivered_chunks(settings, transport):
    request = httpx.Request("POST", BASE_URL)
    transport.events = [delta_event("partial")]
    transport.stream_error = openai.APIConnectionError(request=request)

    chunks = []
    with pytest.raises(TransportError) as excinfo:
        async for chunk in AzureOpenAIEntraHandler(settings).create_message("", USER_HELLO):
            chunks.append(chunk)

    assert chunks == [TextChunk(text="partial")]  # nosec B101
    assert excinfo.value.code is ErrorCode.TRANSIENT  # nosec B101
    assert excinfo.value.retryable is True  # nosec B101


async def test_status_errors_are_classified(settings, transport):
    request = httpx.Request("POST", BASE_URL)
    response = httpx.Response(429, request=request)
    transport.create_error = openai.RateLimitError("Too Many Requests", response=response, body=None)

    with pytest.raises(TransportError) as excinfo:
        await _collect(AzureOpenAIEntraHandler(settings))
    assert excinfo.value.code is ErrorCode.RATE_LIMIT  # nosec B101


async def test_configuration_error_propagates_unchanged_from_stream(transport):
    handler = AzureOpenAIEntraHandler(ProviderSettings())
    with pytest.raises(ConfigurationError):
        await _collect(handler)
    assert transport.calls == []  # nosec B101


async def test_authentication_error_propagates_unchanged_from_stream(settings, transport):
    transport.token_error = ClientAuthenticationError(message="AADSTS7000215: Invalid client secret provided.")
    with pytest.raises(AuthenticationError) as excinfo:
        await _collect(AzureOpenAIEntraHandler(settings))
    assert not isinstance(excinfo.value, TransportError)  # nosec B101


async def test_url_image_rejected_before_network(settings, transport):
    messages = [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "What is this?"},
                {"type": "image", "source": {"type": "url", "url": "https://img.invalid/cat.png"}},
            ],
        }
    ]
    with pytest.raises(UnsupportedContentError) as excinfo:
        await _collect(AzureOpenAIEntraHandler(settings), messages=messages)
    assert isinstance(excinfo.value, ProviderError)  # nosec B101
    assert excinfo.value.source_type == "url"  # nosec B101
    assert transport.credentials == []  # nosec B101


async def test_independent_streams_share_one_client(settings, transport):
    transport.events = [delta_event("a"), delta_event("b")]
    handler = AzureOpenAIEntraHandler(settings)
    first, second = await asyncio.gather(_collect(handler), _collect(handler))
    assert first == second  # nosec B101
    assert len(transport.calls) == 2  # nosec B101
    assert len(transport.clients) == 1  # nosec B101


async def test_stream_lifecycle_is_logged_without_secrets(settings, transport, log_messages):
    transport.events = [delta_event("Hi")]
    await _collect(AzureOpenAIEntraHandler(settings))

    events = [json.loads(m) for m in log_messages]
    names = [e["event"] for e in events]
    assert names == ["client.init", "stream.start", "stream.end"]  # nosec B101
    end = events[-1]
    assert end["provider"] == "azure-openai-entra"  # nosec B101
    assert end["model"] == "gpt-4o"  # nosec B101
    assert end["chunks"] == 1  # nosec B101
    assert all(CLIENT_SECRET not in m and FAKE_BEARER not in m for m in log_messages)  # nosec B101


async def test_stream_error_is_logged_with_code(settings, transport, log_messages):
    transport.create_error = Exception("API Error")
    with pytest.raises(TransportError):
        await _collect(AzureOpenAIEntraHandler(settings))

    error_events = [json.loads(m) for m in log_messages if '"stream.error"' in m]
    assert len(error_events) == 1  # nosec B101
    assert error_events[0]["error_code"] == "unknown"  # nosec B101
    assert error_events[0]["emitted"] is False  # nosec B101


# ----- tokens -----


class _RecordingCounter:
    def __init__(self, result: int) -> None:
        self.result = result
        self.calls = []

    async def count_tokens(self, content, *, use_worker=True):
        self.calls.append((list(content), use_worker))
        return self.result


async def test_count_tokens_delegates_to_counter(settings):
    counter = _RecordingCounter(42)
    handler = AzureOpenAIEntraHandler(settings, token_counter=counter)
    content = [{"type": "text", "text": "hello"}]

    assert await handler.count_tokens(content) == 42  # nosec B101
    assert counter.calls == [(content, True)]  # nosec B101


async def test_count_tokens_default_counter_is_positive(settings):
    handler = AzureOpenAIEntraHandler(settings)
    assert await handler.count_tokens([{"type": "text", "text": "How many tokens is this?"}]) > 0  # nosec B101
