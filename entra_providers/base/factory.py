"""Provider Factory utilities.

Purpose
-------
Create handler instances by canonical provider name. Handler modules are
imported lazily with ``importlib`` so importing the factory never pulls in
the OpenAI or Azure identity SDKs.

Failure semantics
-----------------
No retries or fallbacks; the factory either returns an instance or raises
:class:`UnknownProviderError` with the step that failed.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized.

    Failure modes include:
    - The provider name is not registered in the factory mapping.
    - The provider module cannot be imported or the handler class is missing.
    - The handler constructor rejected its arguments.
    """


class ProviderFactory:
    """Create provider handlers from a canonical name (``"azure-openai-entra"``)."""

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "azure-openai-entra": {
            "module": "entra_providers.azure_entra.client",
            "class": "AzureOpenAIEntraHandler",
        },
    }

    @classmethod
    def create(cls, provider: str, **kwargs: Any) -> Any:
        """Create a provider handler instance.

        Parameters
        ----------
        provider:
            Canonical provider name, case-insensitive.
        **kwargs:
            Handler constructor arguments (``settings``, ``token_counter``).
            When ``settings`` is omitted the handler receives settings loaded
            from the layered configuration.

        Raises
        ------
        UnknownProviderError
            If the provider is unknown, its module fails to import, the
            handler class is missing, or the constructor rejects the arguments.
        """
        name = (provider or "").lower().strip()
        spec = cls._PROVIDERS.get(name)
        if not spec:
            raise UnknownProviderError(f"Unknown provider '{provider}'")

        module_path, class_name = spec["module"], spec["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Handler class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc

        if kwargs.get("settings") is None:
            from ..config import load_provider_settings

            kwargs["settings"] = load_provider_settings()

        try:
            return klass(**kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{provider}' handler constructor: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the supported canonical provider names in registration order."""
        return tuple(cls._PROVIDERS.keys())


__all__ = ["ProviderFactory", "UnknownProviderError"]
