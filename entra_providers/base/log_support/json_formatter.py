"""JSON logging formatter used by the shared ``entra_providers`` logger.

Serializes the standard record fields, hoists keys from JSON-encoded messages
(as produced by :func:`entra_providers.base.logging.log_event`) to the top
level, and masks values under credential-like keys.
"""
from __future__ import annotations

import contextlib
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

ISO = "%Y-%m-%dT%H:%M:%S.%fZ"

REDACTED = "***"

_SENSITIVE_KEY_PARTS = ("secret", "password", "authorization", "api_key")

_RECORD_INTERNALS = frozenset(
    {
        "msg",
        "args",
        "levelname",
        "levelno",
        "name",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }
)


def is_sensitive_key(key: str) -> bool:
    """Return True for keys whose values must never reach a log sink.

    Token *counts* (``tokens``, ``max_tokens``) are not sensitive; bearer
    tokens (``token``, ``access_token``) are.
    """
    k = key.lower()
    if k == "token" or k.endswith("_token"):
        return True
    return any(part in k for part in _SENSITIVE_KEY_PARTS)


def redact(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Return a shallow copy of ``payload`` with sensitive values masked."""
    return {k: (REDACTED if is_sensitive_key(k) and v is not None else v) for k, v in payload.items()}


class JsonFormatter(logging.Formatter):
    """Lightweight JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:
        base: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).strftime(ISO),
            "level": record.levelname,
            "logger": record.name,
        }
        msg_text = record.getMessage()
        base["msg"] = msg_text
        with contextlib.suppress(ValueError):
            parsed = json.loads(msg_text)
            if isinstance(parsed, dict):
                base.update(parsed)
                # CLI events are read by humans in a terminal; drop the escaped duplicate.
                ev = parsed.get("event")
                if isinstance(ev, str) and ev.startswith("cli."):
                    base.pop("msg", None)
        for k, v in record.__dict__.items():
            if k.startswith("_") or k in _RECORD_INTERNALS:
                continue
            base.setdefault(k, v)
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        return json.dumps(redact(base), ensure_ascii=False, default=str)


__all__ = ["JsonFormatter", "ISO", "REDACTED", "is_sensitive_key", "redact"]
