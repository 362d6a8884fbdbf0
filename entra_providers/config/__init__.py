"""Layered configuration for the Azure OpenAI Entra ID adapter.

Sources, merged in order (later wins):
    1. Built-in defaults (``config.defaults``)
    2. Optional external file (JSON or YAML) named by ``PROVIDERS_CONFIG_FILE``,
       section ``azure_openai_entra``
    3. Environment variables (see ``config.env``), after a one-time ``.env`` load
    4. In-code overrides passed to the helper (``None`` values ignored)

External file example (YAML)::

    azure_openai_entra:
      azureOpenAiBaseUrl: https://my-resource.openai.azure.com/
      azureOpenAiDeploymentName: gpt-4o
      azureADTenantId: 00000000-0000-0000-0000-000000000000

Keys may be snake_case field names or the camelCase settings keys.

Public API
----------
* get_provider_config(overrides: dict | None = None) -> dict
* load_provider_settings(overrides: dict | None = None) -> ProviderSettings
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..base.dto.provider_settings import ProviderSettings
from .defaults import (
    AZURE_ENTRA_CONFIG_SECTION,
    AZURE_OPENAI_DEFAULT_API_VERSION,
    AZURE_OPENAI_DEFAULT_DEPLOYMENT,
)
from .env import CREDENTIAL_FIELDS, ENV_MAP, is_placeholder, resolve_env_value

DEFAULTS: Dict[str, Any] = {
    "azure_openai_deployment_name": AZURE_OPENAI_DEFAULT_DEPLOYMENT,
    "azure_openai_api_version": AZURE_OPENAI_DEFAULT_API_VERSION,
}

CONFIG_FILE_ENV = "PROVIDERS_CONFIG_FILE"

_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Load ``KEY=VALUE`` lines from ``$DOTENV_FILE`` (default ``.env``) once.

    Existing variables win unless their value looks like a placeholder.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    try:
        if not os.path.isfile(path):
            return
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip().removeprefix("export ").strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    """Read and cache the external config file; JSON first, then YAML."""
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    data: Any = {}
    if path and Path(path).is_file():
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError:
            data = yaml.safe_load(text) or {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def reset_config_cache() -> None:
    """Forget the cached file contents and ``.env`` state (used by tests)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def _normalize_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase settings keys onto field names; unknown keys are dropped."""
    out: Dict[str, Any] = {}
    for name, info in ProviderSettings.model_fields.items():
        for key in (name, info.alias):
            if key and key in raw:
                out[name] = raw[key]
    return out


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field in ENV_MAP:
        value, _ = resolve_env_value(field)
        if value is not None:
            out[field] = value
    return out


def get_provider_config(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged settings mapping (field names as keys).

    Merge order (later wins): defaults -> external file -> env vars -> overrides.
    Credential fields holding placeholder values are removed from the result.
    """
    _load_dotenv_once()
    cfg: Dict[str, Any] = dict(DEFAULTS)

    section = _load_external_config().get(AZURE_ENTRA_CONFIG_SECTION)
    if isinstance(section, Mapping):
        cfg |= _normalize_keys(section)

    cfg |= _env_overrides()

    if overrides:
        cfg |= {k: v for k, v in _normalize_keys(overrides).items() if v is not None}

    for field in CREDENTIAL_FIELDS:
        if is_placeholder(cfg.get(field)):
            cfg.pop(field, None)
    return cfg


def load_provider_settings(overrides: Optional[Mapping[str, Any]] = None) -> ProviderSettings:
    """Build validated :class:`ProviderSettings` from all configuration sources.

    Raises:
        pydantic.ValidationError: when a merged value is invalid (for example
        a temperature outside ``[0, 2]``).
    """
    return ProviderSettings.model_validate(get_provider_config(overrides))


__all__ = [
    "DEFAULTS",
    "CONFIG_FILE_ENV",
    "get_provider_config",
    "load_provider_settings",
    "reset_config_cache",
]
