"""Structured logging utilities for the provider layer.

All adapter loggers are children of a single ``entra_providers`` logger that
owns one stderr handler (JSON by default). Children propagate to it, so each
event is emitted exactly once regardless of how many modules call
:func:`get_logger`.

``normalized_log_event`` guarantees a fixed key set on every event
(``structured``, ``phase``, ``attempt``, ``error_code``, ``emitted``,
``tokens``) so stream lifecycles can be filtered uniformly.

Environment
-----------
``ENTRA_PROVIDERS_LOG_LEVEL``
    Overrides the base level (``DEBUG``, ``INFO``, ``WARNING``...).
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext, redact

BASE_LOGGER_NAME = "entra_providers"
LOG_LEVEL_ENV = "ENTRA_PROVIDERS_LOG_LEVEL"

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_CONSOLE_HANDLER_ATTR = "_entra_console_handler"
_FILE_HANDLER_ATTR = "_entra_file_handler"
_LEVEL_APPLIED_ATTR = "_entra_level_applied"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a level name case-insensitively, falling back to ``default``."""
    if not value:
        return default
    return _LEVELS.get(value.strip().upper(), default)


def _make_formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _console_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _CONSOLE_HANDLER_ATTR, False)]


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize (once) and return the shared base logger.

    The default level is applied only on first initialization; afterwards the
    level set by :func:`configure_logger` is kept unless ``ENTRA_PROVIDERS_LOG_LEVEL``
    is set. A console handler whose stream was closed (pytest capture swaps)
    is replaced.
    """
    logger = logging.getLogger(BASE_LOGGER_NAME)
    env_level = os.getenv(LOG_LEVEL_ENV)
    if env_level:
        logger.setLevel(_parse_level(env_level, default=level))
    elif not getattr(logger, _LEVEL_APPLIED_ATTR, False):
        logger.setLevel(level)
    setattr(logger, _LEVEL_APPLIED_ATTR, True)
    desired = logger.level

    handlers = _console_handlers(logger)
    for existing in handlers:
        stream = getattr(existing, "stream", None)
        if stream is None or getattr(stream, "closed", False):
            logger.removeHandler(existing)
            with contextlib.suppress(Exception):
                existing.close()
        else:
            existing.setLevel(desired)
            if isinstance(existing, logging.StreamHandler) and stream is not sys.stderr:
                existing.setStream(sys.stderr)
            if json_mode != isinstance(existing.formatter, JsonFormatter):
                existing.setFormatter(_make_formatter(json_mode))

    if not _console_handlers(logger):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(desired)
        handler.setFormatter(_make_formatter(json_mode))
        setattr(handler, _CONSOLE_HANDLER_ATTR, True)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return a logger wired to the shared base handler.

    Names outside the ``entra_providers`` namespace are nested under it so that
    ``get_logger("providers.azure_entra")`` still reaches the base handler.
    """
    base_logger = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base_logger
    if not name.startswith(BASE_LOGGER_NAME + "."):
        name = f"{BASE_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    for handler in _console_handlers(logger):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared logger at runtime.

    Parameters
    ----------
    level:
        New level (number or name). ``None`` keeps the current level.
    file_path:
        When given, attach (or retarget) a rotating file handler writing to
        this path; when ``None``, remove any file handler this module added.
    json_mode:
        Formatter choice for the file handler.

    Returns
    -------
    logging.Logger
        The base logger.
    """
    logger = _ensure_base_logger(json_mode=json_mode, level=logging.INFO)
    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level) if isinstance(level, str) else level)
        for h in logger.handlers:
            h.setLevel(logger.level)

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    abs_path = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    for h in managed:
        if abs_path is not None and getattr(h, "baseFilename", None) == abs_path:
            h.setLevel(logger.level)
            h.setFormatter(_make_formatter(json_mode))
            return logger
        logger.removeHandler(h)
        with contextlib.suppress(Exception):
            h.close()
    if abs_path is None:
        return logger

    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    fh = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    setattr(fh, _FILE_HANDLER_ATTR, True)
    fh.setLevel(logger.level)
    fh.setFormatter(_make_formatter(json_mode))
    logger.addHandler(fh)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit one structured event as a single JSON line.

    ``None`` values are dropped unless ``keep_none`` is set. Credential-like
    keys are masked before serialization.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(redact(payload), ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)


def _coerce_tokens(tokens: Any) -> Any:
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens.items())
    return {"value": repr(tokens)}


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit an event carrying the normalized key set.

    ``error_code`` is omitted when ``None``; the other required keys are always
    present (possibly ``null``). Extra fields never overwrite normalized values.
    """
    base_fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    if error_code is not None:
        base_fields["error_code"] = error_code
    for k, v in extra_fields.items():
        if v is None or base_fields.get(k) is not None:
            continue
        base_fields[k] = v
    log_event(logger, event, ctx, level=level, keep_none=True, **base_fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
