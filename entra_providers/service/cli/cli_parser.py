"""CLI parser construction for entra-providers.

Wires subparsers only; handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``model``, ``tokens`` and ``chat``.

    Performs no I/O. Settings not given as flags come from the layered
    configuration (config file, environment, ``.env``).
    """
    p = argparse.ArgumentParser(
        prog="entra-providers",
        description="Azure OpenAI with Entra ID authentication: inspect models, count tokens, chat",
    )
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    sub = p.add_subparsers(dest="cmd")

    p_model = sub.add_parser("model", help="Show the resolved model for a deployment")
    p_model.add_argument("--deployment", default=None)
    p_model.add_argument("--json", action="store_true")

    p_tokens = sub.add_parser("tokens", help="Count tokens for a text")
    p_tokens.add_argument("--text", required=True)

    p_chat = sub.add_parser("chat", help="Stream a reply to a single prompt")
    p_chat.add_argument("--prompt", required=True)
    p_chat.add_argument("--system", default="")
    p_chat.add_argument("--deployment", default=None)
    p_chat.add_argument("--temperature", type=float, default=None)
    p_chat.add_argument(
        "--no-stream",
        dest="stream",
        action="store_false",
        help="Print the whole reply once the stream completes",
    )

    return p


__all__ = ["build_parser"]
