"""Token kinds, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    TEXT = auto()  # unmatched raw token, or any match inside an open block
    KEYWORD = auto()  # keyword or operator
    DIRECTIVE = auto()  # prefix + word, e.g. "#include"
    BLOCK_START = auto()  # opening delimiter of a block
    BLOCK_END = auto()  # closing delimiter of the open block
    ESCAPED = auto()  # the single token following a backslash


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A classified token with its source text and highlight colour."""

    kind: TokenKind
    text: str
    span: Span
    color: str | None = None


START = Position(1, 1, 0)


def advance_position(pos: Position, text: str) -> Position:
    """Return the position just past *text* when it starts at *pos*."""
    line = pos.line
    column = pos.column
    for ch in text:
        if ch == "\n":
            line += 1
            column = 1
        else:
            column += 1
    return Position(line, column, pos.offset + len(text))


def is_word_char(ch: str) -> bool:
    """Return True if ch continues a word token (letter, digit or underscore)."""
    return ch.isalnum() or ch == "_"
