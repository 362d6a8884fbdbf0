"""Single-class Protocol modules; import via ``entra_providers.base.interfaces``."""

from .api_handler import ApiHandler
from .token_counter import TokenCounter

__all__ = ["ApiHandler", "TokenCounter"]
