"""entra-providers CLI (package entrypoint).

Wires argument parsing to the action handlers in ``cli_actions``; no provider
logic lives here.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from ...base.logging import configure_logger
from .cli_actions import handle_chat, handle_model, handle_tokens
from .cli_parser import build_parser

_HANDLERS = {
    "model": handle_model,
    "tokens": handle_tokens,
    "chat": handle_chat,
}


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, 1 provider failure, 2 usage error).
    """
    p = build_parser()
    args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
    if args.cmd is None:
        p.print_help(sys.stderr)
        return 2
    if args.log_level:
        configure_logger(level=args.log_level)
    return _HANDLERS[args.cmd](args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
