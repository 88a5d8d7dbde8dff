"""Block-aware scan of source text into classified highlight tokens."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from lexcalc.render import FONT_STYLE, render
from lexcalc.rules import Block, Directive, Keyword, Rule, cpp_rules, match_rule
from lexcalc.scanner import has_next, next_token
from lexcalc.tokens import START, Span, Token, TokenKind, advance_position

logger = logging.getLogger(__name__)

ESCAPE = "\\"


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Classified tokens plus the opening token of a block left unclosed."""

    tokens: tuple[Token, ...]
    unterminated: Token | None = None
    open_block: Block | None = None

    @property
    def text(self) -> str:
        return "".join(t.text for t in self.tokens)

    @property
    def dangling(self) -> Token | None:
        """The unterminated opener, unless its block simply ends with the line.

        A line comment on the last line of a file without a trailing newline
        is complete as far as a reader is concerned.
        """
        if self.open_block is not None and self.open_block.end == "\n":
            return None
        return self.unterminated


def _kind_for(rule: Rule) -> TokenKind:
    if isinstance(rule, Keyword):
        return TokenKind.KEYWORD
    if isinstance(rule, Directive):
        return TokenKind.DIRECTIVE
    return TokenKind.BLOCK_START


def scan(source: str, rules: Sequence[Rule] | None = None) -> ScanResult:
    """Split *source* into tokens classified by *rules* (default: C/C++).

    Rules are tried in order and the first match wins. Only one block can be
    open at a time: inside it, only that block's end delimiter is significant
    and every other match is plain text. A backslash suppresses matching of
    exactly the next raw token.
    """
    if rules is None:
        rules = cpp_rules()

    tokens: list[Token] = []
    pos = 0
    here = START
    active: Block | None = None
    opened: Token | None = None
    escaped = False

    while has_next(source, pos):
        text, pos = next_token(source, pos)

        if escaped:
            kind = TokenKind.ESCAPED
            matched: Rule | None = None
        else:
            matched = None
            for rule in rules:
                hit = match_rule(rule, text, source, pos, active)
                if hit is not None:
                    text, pos = hit
                    matched = rule
                    break

            if matched is None:
                kind = TokenKind.TEXT
            elif active is None:
                kind = _kind_for(matched)
            elif matched is active:
                kind = TokenKind.BLOCK_END
            else:
                kind = TokenKind.TEXT

        end = advance_position(here, text)
        color = matched.color if matched is not None and kind != TokenKind.TEXT else None
        token = Token(kind, text, Span(here, end), color)
        tokens.append(token)
        here = end

        if kind == TokenKind.BLOCK_START and isinstance(matched, Block):
            active = matched
            opened = token
        elif kind == TokenKind.BLOCK_END:
            active = None
            opened = None

        escaped = not escaped and text == ESCAPE

    if opened is not None:
        logger.debug(
            "block %r opened at %d:%d is not closed",
            opened.text,
            opened.span.start.line,
            opened.span.start.column,
        )
    return ScanResult(tuple(tokens), opened, active)


def highlight(
    source: str, rules: Sequence[Rule] | None = None, font_style: str = FONT_STYLE
) -> str:
    """Scan and render *source* to highlight markup in one step."""
    return render(scan(source, rules).tokens, font_style=font_style)
