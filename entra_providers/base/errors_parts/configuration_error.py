"""Missing or unusable adapter configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .authentication_error import AuthenticationError


@dataclass(kw_only=True)
class ConfigurationError(AuthenticationError):
    """Raised at client acquisition when required settings are absent.

    Subclasses :class:`AuthenticationError` because the required fields are
    the Entra ID credentials plus the endpoint they authenticate against, so
    callers guarding token failures also catch incomplete configuration.

    Attributes:
        missing: Configuration keys (camelCase, as users set them) that were empty.
    """

    missing: Tuple[str, ...] = field(default_factory=tuple)


__all__ = ["ConfigurationError"]
