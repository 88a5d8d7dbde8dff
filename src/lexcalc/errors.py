"""Error types with formatted source context."""

from __future__ import annotations

from pathlib import Path

from lexcalc.tokens import Span


class ConfigError(Exception):
    """Raised when a configuration table cannot be turned into settings."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(self.format())

    def format(self) -> str:
        if self.path is None:
            return f"error: {self.message}"
        return f"error: {self.message}\n  --> {self.path}"


class UnterminatedBlockError(Exception):
    """A block opened at *span* is still open at end of input."""

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input") -> str:
        return f"error: {self.message}\n" + format_context(self.span, self.source, filename)


def format_context(span: Span, source: str, filename: str) -> str:
    """Render the ``--> file:line:col`` header and caret-underlined source line.

    The carets cover *span* when it stays on one line, else the rest of the line.
    """
    lines = source.splitlines(keepends=True)
    line_idx = span.start.line - 1
    col = span.start.column
    source_line = lines[line_idx].rstrip("\r\n") if 0 <= line_idx < len(lines) else ""

    if span.end.line == span.start.line:
        width = span.end.column - col
    else:
        width = len(source_line) - col + 1
    carets = "^" * max(1, width)

    line_num = str(span.start.line)
    gutter = " " * len(line_num)
    return (
        f"{gutter} --> {filename}:{span.start.line}:{col}\n"
        f"{gutter} |\n"
        f"{line_num} | {source_line}\n"
        f"{gutter} | {' ' * (col - 1)}{carets}"
    )
