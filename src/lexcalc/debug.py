"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from lexcalc.highlighter import ScanResult
from lexcalc.tokens import Token


def dump_tokens(result: ScanResult, *, file: TextIO | None = None) -> None:
    """Print one line per token to *file* (stderr), then any unterminated block."""
    if file is None:
        file = sys.stderr
    for token in result.tokens:
        _dump_token(token, file)
    if result.unterminated is not None:
        start = result.unterminated.span.start
        file.write(f"unterminated {result.unterminated.text!r} at {start.line}:{start.column}\n")


def _dump_token(token: Token, f: TextIO) -> None:
    start = token.span.start
    line = f"{start.line}:{start.column} {token.kind.name} {token.text!r}"
    if token.color:
        line += f" [{token.color}]"
    f.write(line + "\n")
