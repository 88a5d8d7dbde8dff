"""Raw token reads over an explicit cursor.

A raw token is a maximal run of word characters, or a single other
character. Both reads take the cursor as an argument and never hold state,
so a failed multi-token match is undone simply by keeping the old cursor.
"""

from __future__ import annotations

from lexcalc.tokens import is_word_char


def next_token(source: str, pos: int) -> tuple[str, int]:
    """Read the raw token at *pos*. Returns (token, cursor after it).

    At end of input the token is empty and the cursor does not move.
    """
    end = pos
    length = len(source)
    while end < length and is_word_char(source[end]):
        end += 1
    if end == pos and end < length:
        end += 1
    return source[pos:end], end


def peek_token(source: str, pos: int) -> str:
    """Read the raw token at *pos* without advancing."""
    token, _ = next_token(source, pos)
    return token


def has_next(source: str, pos: int) -> bool:
    return pos < len(source)
