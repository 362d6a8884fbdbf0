"""
Typed settings for the Azure OpenAI Entra ID adapter.

Purpose
-------
Carry the seven configuration values the adapter consumes. Fields use
snake_case in Python and accept the camelCase keys used by the assistant's
settings store (``azureOpenAiBaseUrl``, ``azureADTenantId``...), so a stored
profile can be validated directly.

External dependencies
---------------------
- Pydantic v2 ``BaseModel``.

Notes
-----
- The model is intentionally mutable: the handler applies the default
  temperature once, on the caller's instance.
- Validation is re-run on assignment, so a bad temperature set later is
  rejected as well.
"""
from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ProviderSettings(BaseModel):
    """Endpoint, deployment, API version, Entra ID credentials, temperature.

    Attributes
    ----------
    azure_openai_base_url:
        Resource endpoint, e.g. ``https://my-resource.openai.azure.com/``.
    azure_openai_deployment_name:
        Deployment to call; also the model id in requests.
    azure_openai_api_version:
        Data-plane API version.
    azure_ad_tenant_id, azure_ad_client_id, azure_ad_client_secret:
        Service principal used for the client-credentials flow.
    model_temperature:
        Sampling temperature in ``[0.0, 2.0]``; ``None`` means "use default".
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, protected_namespaces=())

    azure_openai_base_url: Optional[str] = Field(default=None, alias="azureOpenAiBaseUrl")
    azure_openai_deployment_name: Optional[str] = Field(default=None, alias="azureOpenAiDeploymentName")
    azure_openai_api_version: Optional[str] = Field(default=None, alias="azureOpenAiApiVersion")
    azure_ad_tenant_id: Optional[str] = Field(default=None, alias="azureADTenantId")
    azure_ad_client_id: Optional[str] = Field(default=None, alias="azureADClientId")
    azure_ad_client_secret: Optional[str] = Field(default=None, alias="azureADClientSecret", repr=False)
    model_temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0, alias="modelTemperature")

    def missing_required(self) -> Tuple[str, ...]:
        """Return the camelCase keys of required fields that are empty.

        Required for client construction: endpoint, tenant id, client id,
        client secret. Order is stable for error messages.
        """
        required = (
            ("azureOpenAiBaseUrl", self.azure_openai_base_url),
            ("azureADTenantId", self.azure_ad_tenant_id),
            ("azureADClientId", self.azure_ad_client_id),
            ("azureADClientSecret", self.azure_ad_client_secret),
        )
        return tuple(key for key, value in required if not (value and value.strip()))


__all__ = ["ProviderSettings"]
