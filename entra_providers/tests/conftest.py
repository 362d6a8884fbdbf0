"""Pytest fixtures for the entra_providers test suite.

Network-facing SDK classes are replaced with the fakes in ``helpers``:
- ``ClientSecretCredential`` in ``azure_entra.credentials``
- ``AsyncAzureOpenAI`` in ``azure_entra.client``

Every test starts from a clean configuration environment (no Azure variables,
no config file, no ``.env``).
"""

from __future__ import annotations

import logging
from typing import Iterator, List

import pytest

from entra_providers.azure_entra import client as client_module
from entra_providers.azure_entra import credentials as credentials_module
from entra_providers.base.dto import ProviderSettings
from entra_providers.base.logging import BASE_LOGGER_NAME, LOG_LEVEL_ENV
from entra_providers.config import CONFIG_FILE_ENV, reset_config_cache
from entra_providers.config.env import ENV_ALIASES, ENV_MAP
from entra_providers.tests.helpers import (
    BASE_URL,
    CLIENT_ID,
    CLIENT_SECRET,
    TENANT_ID,
    FakeAzureOpenAI,
    FakeCredential,
    FakeTransport,
    ListHandler,
)


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Isolate every test from the developer's Azure environment."""
    names = set(ENV_MAP.values())
    for aliases in ENV_ALIASES.values():
        names.update(aliases)
    for name in names:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv(CONFIG_FILE_ENV, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    yield
    reset_config_cache()
    logging.getLogger(BASE_LOGGER_NAME).setLevel(logging.INFO)


@pytest.fixture()
def transport(monkeypatch: pytest.MonkeyPatch) -> FakeTransport:
    """Patch the SDK classes and return the scripted transport."""
    t = FakeTransport()

    def _make_credential(tenant_id, client_id, client_secret):
        cred = FakeCredential(tenant_id, client_id, client_secret, error=t.token_error)
        t.credentials.append(cred)
        return cred

    def _make_client(**kwargs):
        c = FakeAzureOpenAI(t, **kwargs)
        t.clients.append(c)
        return c

    monkeypatch.setattr(credentials_module, "ClientSecretCredential", _make_credential)
    monkeypatch.setattr(client_module, "AsyncAzureOpenAI", _make_client)
    return t


@pytest.fixture()
def settings() -> ProviderSettings:
    return ProviderSettings(
        azure_openai_base_url=BASE_URL,
        azure_openai_deployment_name="gpt-4o",
        azure_ad_tenant_id=TENANT_ID,
        azure_ad_client_id=CLIENT_ID,
        azure_ad_client_secret=CLIENT_SECRET,
    )


@pytest.fixture()
def log_messages() -> Iterator[List[str]]:
    """Collect raw JSON event lines emitted under the shared base logger."""
    handler = ListHandler()
    base = logging.getLogger(BASE_LOGGER_NAME)
    base.addHandler(handler)
    yield handler.messages
    base.removeHandler(handler)
