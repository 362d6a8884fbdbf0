"""CLI action handlers.

Purpose
-------
Subcommand handlers for ``entra-providers``. Each takes the parsed
``argparse.Namespace`` and returns a process exit code. No top-level side
effects; safe to import in tests.

Error semantics
---------------
- Provider failures and invalid settings are rendered as an error chunk JSON
  line on stderr with exit code 1; logs carry the details.
- Streamed text goes to stdout, the usage chunk to stderr as JSON, so stdout
  holds only the reply.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, TextIO

from pydantic import ValidationError

from ...azure_entra.client import AzureOpenAIEntraHandler
from ...base.dto.messages import TextBlock
from ...base.errors import ErrorCode, ProviderError
from ...base.logging import LogContext, get_logger, normalized_log_event
from ...base.streaming import ErrorChunk, TextChunk, UsageChunk, accumulate_chunks, error_chunk_from_exception
from ...config import load_provider_settings
from ...config.defaults import AZURE_ENTRA_PROVIDER_NAME

_logger = get_logger("cli")


def build_handler(args: argparse.Namespace) -> AzureOpenAIEntraHandler:
    """Load settings (flags override configuration) and build the handler.

    Raises:
        pydantic.ValidationError: a merged setting is out of range.
    """
    overrides: Dict[str, Any] = {
        "azure_openai_deployment_name": getattr(args, "deployment", None),
        "model_temperature": getattr(args, "temperature", None),
    }
    return AzureOpenAIEntraHandler(load_provider_settings(overrides))


def _print_error(chunk: ErrorChunk, err: TextIO) -> int:
    print(json.dumps(chunk.to_dict(), ensure_ascii=False), file=err)
    return 1


def _invalid_settings(exc: ValidationError, err: TextIO) -> int:
    return _print_error(ErrorChunk(error=ErrorCode.VALIDATION.value, message=str(exc)), err)


def handle_model(args: argparse.Namespace) -> int:
    """Print the model descriptor the handler resolves for its deployment."""
    try:
        model = build_handler(args).get_model()
    except ValidationError as exc:
        return _invalid_settings(exc, sys.stderr)
    if args.json:
        print(json.dumps(model.to_dict(), indent=2))
        return 0
    info = model.info
    print(f"id:             {model.id}")
    print(f"description:    {info.description}")
    print(f"max_tokens:     {info.max_tokens}")
    print(f"context_window: {info.context_window}")
    print(f"images:         {'yes' if info.supports_images else 'no'}")
    print(f"price (USD/M):  in {info.input_price} / out {info.output_price}")
    return 0


def handle_tokens(args: argparse.Namespace) -> int:
    """Print the estimated token count for ``--text``."""
    try:
        handler = build_handler(args)
    except ValidationError as exc:
        return _invalid_settings(exc, sys.stderr)
    count = asyncio.run(handler.count_tokens([TextBlock(text=args.text)]))
    print(count)
    return 0


async def _stream_chat(handler: AzureOpenAIEntraHandler, system: str, prompt: str, out: TextIO, err: TextIO) -> int:
    messages = [{"role": "user", "content": prompt}]
    async with handler:
        async for chunk in handler.create_message(system, messages):
            if isinstance(chunk, TextChunk):
                out.write(chunk.text)
                out.flush()
            elif isinstance(chunk, UsageChunk):
                out.write("\n")
                print(json.dumps(chunk.to_dict()), file=err)
    return 0


async def _collect_chat(handler: AzureOpenAIEntraHandler, system: str, prompt: str, out: TextIO, err: TextIO) -> int:
    messages = [{"role": "user", "content": prompt}]
    async with handler:
        summary = await accumulate_chunks(handler.create_message(system, messages))
    print(summary.text, file=out)
    if summary.usage is not None:
        print(json.dumps(summary.usage.to_dict()), file=err)
    return 0


def handle_chat(args: argparse.Namespace) -> int:
    """Reply to ``--prompt`` (optionally with ``--system``), streamed unless ``--no-stream``."""
    try:
        handler = build_handler(args)
    except ValidationError as exc:
        return _invalid_settings(exc, sys.stderr)
    ctx = LogContext(provider=AZURE_ENTRA_PROVIDER_NAME, model=handler.get_model().id)
    try:
        run = _stream_chat if getattr(args, "stream", True) else _collect_chat
        return asyncio.run(run(handler, args.system, args.prompt, sys.stdout, sys.stderr))
    except ProviderError as exc:
        normalized_log_event(
            _logger,
            "cli.chat.error",
            ctx,
            phase="finalize",
            error_code=exc.code.value,
            emitted=None,
            tokens=None,
        )
        return _print_error(error_chunk_from_exception(exc), sys.stderr)


__all__ = ["build_handler", "handle_model", "handle_tokens", "handle_chat"]
