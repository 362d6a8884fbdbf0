"""Entra ID token exchange failures."""
from __future__ import annotations

from dataclasses import dataclass

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass(kw_only=True)
class AuthenticationError(ProviderError):
    """Raised when the identity provider cannot issue a bearer token.

    The message names the tenant and client id involved; the client secret
    never appears in it.
    """

    code: ErrorCode = ErrorCode.AUTH


__all__ = ["AuthenticationError"]
