"""Provider interfaces public surface (Protocols)."""

from .interfaces_parts import ApiHandler, TokenCounter

__all__ = ["ApiHandler", "TokenCounter"]
