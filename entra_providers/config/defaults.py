"""entra_providers.config.defaults
===============================

Stable default values for the Azure OpenAI Entra ID adapter. Plain constants
only; no imports from other packages to stay free of cycles.
"""

from __future__ import annotations

# Canonical provider key used by the factory, logs, and config file sections.
AZURE_ENTRA_PROVIDER_NAME = "azure-openai-entra"
AZURE_ENTRA_CONFIG_SECTION = "azure_openai_entra"

# Deployment used when settings do not name one.
AZURE_OPENAI_DEFAULT_DEPLOYMENT = "gpt-4"

# Data-plane API version used when settings do not name one.
AZURE_OPENAI_DEFAULT_API_VERSION = "2024-02-01"

# Sampling temperature applied once when settings leave it unset.
AZURE_OPENAI_DEFAULT_TEMPERATURE = 0.3

# OAuth2 scope (audience) for Azure Cognitive Services tokens.
AZURE_COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"


__all__ = [
    "AZURE_ENTRA_PROVIDER_NAME",
    "AZURE_ENTRA_CONFIG_SECTION",
    "AZURE_OPENAI_DEFAULT_DEPLOYMENT",
    "AZURE_OPENAI_DEFAULT_API_VERSION",
    "AZURE_OPENAI_DEFAULT_TEMPERATURE",
    "AZURE_COGNITIVE_SERVICES_SCOPE",
]
