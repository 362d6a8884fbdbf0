"""entra_providers.config.env
==========================

Environment variable mapping for adapter settings.

Design Notes
------------
- ``ENV_MAP`` maps each ``ProviderSettings`` field to its canonical variable.
  The credential variables reuse the names ``azure-identity`` already reads
  (``AZURE_TENANT_ID``...), so one environment serves both.
- ``ENV_ALIASES`` lists accepted alternatives, canonical first.
- Helpers never raise on unset variables; callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "azure_openai_base_url": "AZURE_OPENAI_BASE_URL",
    "azure_openai_deployment_name": "AZURE_OPENAI_DEPLOYMENT_NAME",
    "azure_openai_api_version": "AZURE_OPENAI_API_VERSION",
    "azure_ad_tenant_id": "AZURE_TENANT_ID",
    "azure_ad_client_id": "AZURE_CLIENT_ID",
    "azure_ad_client_secret": "AZURE_CLIENT_SECRET",  # pragma: allowlist secret - env var name
    "model_temperature": "AZURE_OPENAI_TEMPERATURE",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "azure_openai_base_url": ("AZURE_OPENAI_BASE_URL", "AZURE_OPENAI_ENDPOINT"),
    "azure_openai_deployment_name": ("AZURE_OPENAI_DEPLOYMENT_NAME", "AZURE_OPENAI_DEPLOYMENT"),
}

# Settings fields whose placeholder values are treated as unset.
CREDENTIAL_FIELDS = ("azure_ad_tenant_id", "azure_ad_client_id", "azure_ad_client_secret")


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if ``val`` looks like a placeholder or test value.

    Heuristics (case-insensitive): contains ``placeholder``, ``changeme`` or
    ``example``, or starts with ``test_``.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def get_env_var_candidates(field: str) -> Iterable[str]:
    """Yield acceptable variable names for a settings field, canonical first."""
    canonical = ENV_MAP.get(field)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(field, ()):
        if alias != canonical:
            yield alias


def resolve_env_value(field: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, variable_name)`` for the first non-empty candidate.

    Returns ``(None, None)`` when no candidate is set.
    """
    for name in get_env_var_candidates(field):
        val = os.getenv(name)
        if val is not None and val.strip():
            return val.strip(), name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "CREDENTIAL_FIELDS",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_env_value",
]
