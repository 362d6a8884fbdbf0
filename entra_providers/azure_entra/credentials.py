"""Entra ID bearer token provider for the Azure OpenAI client.

Purpose:
- Wrap an ``azure.identity.aio.ClientSecretCredential`` in the async
  zero-argument callable ``AsyncAzureOpenAI(azure_ad_token_provider=...)``
  expects.

External dependencies:
- ``azure-identity`` performs the client-credentials exchange and owns token
  caching and refresh; every call here simply asks it for a token.

Failure semantics:
- Identity errors are re-raised as ``AuthenticationError`` naming tenant and
  client id (never the secret). This covers a tenant id the identity library
  refuses at construction and any failure while fetching a token. Rejected
  credentials and unclassified failures map to ``AUTH``; timeouts and
  connection failures keep their classified code.
"""

from __future__ import annotations

from azure.core.exceptions import ClientAuthenticationError
from azure.identity.aio import ClientSecretCredential

from ..base.dto.provider_settings import ProviderSettings
from ..base.errors import AuthenticationError, ErrorCode, RETRYABLE_CODES, classify_exception
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import AZURE_COGNITIVE_SERVICES_SCOPE, AZURE_ENTRA_PROVIDER_NAME


def build_credential(settings: ProviderSettings, *, model: str | None = None) -> ClientSecretCredential:
    """Create the client-secret credential for ``settings``.

    Callers validate that tenant, client id, and secret are present first.

    Raises:
        AuthenticationError: the identity library refused the values, e.g. a
            tenant id with characters outside the allowed set.
    """
    try:
        return ClientSecretCredential(
            settings.azure_ad_tenant_id,
            settings.azure_ad_client_id,
            settings.azure_ad_client_secret,
        )
    except ValueError as exc:
        raise AuthenticationError(
            message=(
                f"Entra ID credential rejected for tenant '{settings.azure_ad_tenant_id}' "
                f"and client '{settings.azure_ad_client_id}': {exc}"
            ),
            provider=AZURE_ENTRA_PROVIDER_NAME,
            model=model,
            raw=exc,
        ) from exc


class EntraTokenProvider:
    """Async callable returning a fresh bearer token string on each call.

    Attributes:
        scope: OAuth2 scope requested on every call.
        tenant_id / client_id: Identity used, for error messages and logs.
    """

    def __init__(
        self,
        credential: ClientSecretCredential,
        *,
        tenant_id: str,
        client_id: str,
        scope: str = AZURE_COGNITIVE_SERVICES_SCOPE,
        ctx: LogContext | None = None,
    ) -> None:
        self._credential = credential
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.scope = scope
        self._ctx = ctx
        self._logger = get_logger("providers.azure_entra.auth")

    async def __call__(self) -> str:
        try:
            access_token = await self._credential.get_token(self.scope)
        except Exception as exc:  # noqa: BLE001 - any token failure is an auth failure
            raise self._auth_error(exc) from exc
        return access_token.token

    def _auth_error(self, exc: Exception) -> AuthenticationError:
        code = classify_exception(exc)
        if isinstance(exc, ClientAuthenticationError) or code is ErrorCode.UNKNOWN:
            code = ErrorCode.AUTH
        normalized_log_event(
            self._logger,
            "auth.token_failed",
            self._ctx,
            phase="auth",
            error_code=code.value,
            emitted=False,
            tenant_id=self.tenant_id,
            client_id=self.client_id,
            error_type=type(exc).__name__,
        )
        return AuthenticationError(
            code=code,
            message=(
                f"Entra ID token request failed for tenant '{self.tenant_id}' "
                f"and client '{self.client_id}': {str(exc) or type(exc).__name__}"
            ),
            provider=AZURE_ENTRA_PROVIDER_NAME,
            model=self._ctx.model if self._ctx else None,
            retryable=code in RETRYABLE_CODES,
            raw=exc,
        )

    async def close(self) -> None:
        """Close the underlying credential's transport."""
        await self._credential.close()


__all__ = ["EntraTokenProvider", "build_credential"]
