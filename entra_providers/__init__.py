"""entra_providers package

Azure OpenAI chat handler authenticated with Microsoft Entra ID (service
principal client credentials) for the assistant's provider layer.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode` and subclasses
    - Factory: :func:`create`, :class:`ProviderFactory`
    - Settings: :class:`ProviderSettings`, :func:`load_provider_settings`

Example::

    from entra_providers import create

    handler = create("azure-openai-entra")
    async for chunk in handler.create_message("Be brief.", [{"role": "user", "content": "Hi"}]):
        ...
"""

from typing import Any

from .base.dto import ProviderSettings
from .base.errors import (
    AuthenticationError,
    ConfigurationError,
    ErrorCode,
    ProviderError,
    TransportError,
    UnsupportedContentError,
)
from .base.factory import ProviderFactory, UnknownProviderError
from .config import load_provider_settings

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ProviderError",
    "ErrorCode",
    "AuthenticationError",
    "ConfigurationError",
    "TransportError",
    "UnsupportedContentError",
    "ProviderFactory",
    "UnknownProviderError",
    "ProviderSettings",
    "load_provider_settings",
    "create",
]


def create(provider_name: str, **kwargs: Any):
    """Instantiate a provider handler via :class:`ProviderFactory`.

    Parameters
    ----------
    provider_name:
        Canonical provider name (``"azure-openai-entra"``).
    **kwargs:
        Handler constructor arguments (``settings``, ``token_counter``).

    Raises
    ------
    ProviderError
        When the provider is unknown or the handler cannot be built. Errors
        that already are ``ProviderError`` propagate unchanged.
    """
    try:
        return ProviderFactory.create(provider_name, **kwargs)
    except ProviderError:
        raise
    except Exception as e:  # Wrap in unified error type
        raise ProviderError(
            code=ErrorCode.UNKNOWN,
            message=f"Failed to create provider '{provider_name}': {e}",
            provider=provider_name,
        ) from e
