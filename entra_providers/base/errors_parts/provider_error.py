"""
Structured provider error exception type.

Every failure surfaced by the Azure adapter is a ``ProviderError`` carrying a
normalized :class:`ErrorCode`, the provider key, and the deployment involved.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable message naming the credential or transport problem.
        provider: Provider key where the error originated.
        model: Deployment name associated with the failure, when known.
        retryable: Hint for callers that implement their own retry policy.
        raw: Original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[BaseException] = None

    def __str__(self) -> str:
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
