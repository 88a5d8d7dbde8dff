"""Highlight rules: keywords, prefixed directives, and delimited blocks."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lexcalc.errors import ConfigError
from lexcalc.scanner import has_next, next_token, peek_token


@dataclass(frozen=True, slots=True)
class Keyword:
    """A keyword or operator, matched by exact equality with one raw token."""

    text: str
    color: str


@dataclass(frozen=True, slots=True)
class Directive:
    """A prefixed word such as ``#include``; blanks may follow the prefix."""

    word: str
    color: str
    prefix: str = "#"


@dataclass(frozen=True, slots=True)
class Block:
    """A delimited region such as a string literal or a comment."""

    start: str
    end: str
    color: str


Rule = Keyword | Directive | Block


def match_rule(
    rule: Rule, token: str, source: str, pos: int, active: Block | None
) -> tuple[str, int] | None:
    """Try *rule* against raw *token*, whose text ends at cursor *pos*.

    Returns (matched text, cursor after it) or None. A block rule looks for
    its end delimiter when it is the *active* block, else for its start.
    """
    if isinstance(rule, Keyword):
        return (token, pos) if token == rule.text else None
    if isinstance(rule, Directive):
        return _match_directive(rule, token, source, pos)
    if isinstance(rule, Block):
        wanted = rule.end if active is rule else rule.start
        return _match_literal(wanted, token, source, pos)
    raise TypeError(f"unknown rule type {type(rule).__name__}")


def _match_literal(wanted: str, token: str, source: str, pos: int) -> tuple[str, int] | None:
    text = token
    while len(text) < len(wanted) and wanted.startswith(text) and has_next(source, pos):
        piece, pos = next_token(source, pos)
        text += piece
    if text == wanted:
        return text, pos
    return None


def _match_directive(rule: Directive, token: str, source: str, pos: int) -> tuple[str, int] | None:
    matched = _match_literal(rule.prefix, token, source, pos)
    if matched is None:
        return None
    text, pos = matched

    while has_next(source, pos) and peek_token(source, pos) in (" ", "\t"):
        blank, pos = next_token(source, pos)
        text += blank

    word = ""
    while len(word) < len(rule.word) and rule.word.startswith(word) and has_next(source, pos):
        piece, pos = next_token(source, pos)
        word += piece
    if word == rule.word:
        return text + word, pos
    return None


# ---------------------------------------------------------------------------
# Default C/C++ rule set
# ---------------------------------------------------------------------------

BLOCK_COLOR = "green"
KEYWORD_COLOR = "#808000"
DIRECTIVE_COLOR = "blue"
OPERATOR_COLOR = "red"

CPP_BLOCKS: tuple[tuple[str, str], ...] = (
    ('"', '"'),
    ("'", "'"),
    ("/*", "*/"),
    ("//", "\n"),
)

CPP_KEYWORDS: tuple[str, ...] = (
    "asm", "auto",
    "bool", "break",
    "case", "catch", "cdecl", "char", "class", "const", "const_cast", "continue",
    "default", "delete", "double", "do", "dynamic_cast",
    "else", "enum", "explicit", "extern",
    "far", "float", "for", "friend",
    "goto",
    "huge",
    "if", "interrupt", "int",
    "long",
    "mutable",
    "namespace", "near", "new",
    "operator",
    "pascal", "private", "protected", "public",
    "register", "reinterpret_cast", "return",
    "short", "signed", "sizeof", "static", "static_cast", "struct", "switch",
    "template", "this", "throw", "try", "typedef", "typename",
    "union", "unsigned", "using",
    "virtual", "void", "volatile",
    "while",
    "yield",
    # constants
    "true", "false", "TRUE", "FALSE", "NULL",
)  # fmt: skip

CPP_DIRECTIVES: tuple[str, ...] = (
    "define",
    "elif", "else", "endif", "error",
    "if", "ifdef", "ifndef", "include",
    "line",
    "pragma",
    "undef",
    "warning",
)  # fmt: skip

CPP_OPERATORS: tuple[str, ...] = (
    ">", "<", "{", "}", "(", ")", "[", "]", "+", "-", ":", "&", "!", "|",
    "=", "~", "?", ".", ";", ",", "%", "^", "/", "*",
)  # fmt: skip


def keywords(words: Iterable[str], color: str) -> list[Keyword]:
    return [Keyword(w, color) for w in words]


def directives(words: Iterable[str], color: str, prefix: str = "#") -> list[Directive]:
    return [Directive(w, color, prefix) for w in words]


def blocks(pairs: Iterable[tuple[str, str]], color: str) -> list[Block]:
    return [Block(start, end, color) for start, end in pairs]


def cpp_rules() -> tuple[Rule, ...]:
    """Return the C/C++ rule set in matching order.

    Blocks come first so that "/*" wins over the "/" operator.
    """
    rules: list[Rule] = []
    rules.extend(blocks(CPP_BLOCKS, BLOCK_COLOR))
    rules.extend(keywords(CPP_KEYWORDS, KEYWORD_COLOR))
    rules.extend(directives(CPP_DIRECTIVES, DIRECTIVE_COLOR))
    rules.extend(keywords(CPP_OPERATORS, OPERATOR_COLOR))
    return tuple(rules)


# ---------------------------------------------------------------------------
# Rules from a [highlight] config table
# ---------------------------------------------------------------------------


def rules_from_config(config: dict[str, Any], path: Path | None = None) -> tuple[Rule, ...]:
    """Build a rule set from the ``[highlight]`` table of a config file.

    Each of the blocks/keywords/directives/operators sections that is present
    replaces the matching default section; absent sections keep the defaults.
    """
    table = config.get("highlight")
    if table is None:
        return cpp_rules()
    if not isinstance(table, dict):
        raise ConfigError("[highlight] must be a table", path)

    block_rules: list[Rule] = list(blocks(CPP_BLOCKS, BLOCK_COLOR))
    if "blocks" in table:
        block_rules = list(_config_blocks(table["blocks"], path))

    keyword_rules: list[Rule] = list(keywords(CPP_KEYWORDS, KEYWORD_COLOR))
    if "keywords" in table:
        section = _section(table, "keywords", path)
        words = _words(section, "keywords", path)
        keyword_rules = list(keywords(words, _color(section, "keywords", KEYWORD_COLOR, path)))

    directive_rules: list[Rule] = list(directives(CPP_DIRECTIVES, DIRECTIVE_COLOR))
    if "directives" in table:
        section = _section(table, "directives", path)
        words = _words(section, "directives", path)
        color = _color(section, "directives", DIRECTIVE_COLOR, path)
        prefix = section.get("prefix", "#")
        if not isinstance(prefix, str) or not prefix:
            raise ConfigError("[highlight.directives] prefix must be a non-empty string", path)
        directive_rules = list(directives(words, color, prefix))

    operator_rules: list[Rule] = list(keywords(CPP_OPERATORS, OPERATOR_COLOR))
    if "operators" in table:
        section = _section(table, "operators", path)
        words = _words(section, "operators", path)
        operator_rules = list(keywords(words, _color(section, "operators", OPERATOR_COLOR, path)))

    return tuple(block_rules + keyword_rules + directive_rules + operator_rules)


def _section(table: dict[str, Any], name: str, path: Path | None) -> dict[str, Any]:
    section = table[name]
    if not isinstance(section, dict):
        raise ConfigError(f"[highlight.{name}] must be a table", path)
    return section


def _words(section: dict[str, Any], name: str, path: Path | None) -> Sequence[str]:
    words = section.get("words", [])
    if not isinstance(words, list) or not all(isinstance(w, str) and w for w in words):
        raise ConfigError(f"[highlight.{name}] words must be a list of non-empty strings", path)
    return words


def _color(section: dict[str, Any], name: str, default: str, path: Path | None) -> str:
    color = section.get("color", default)
    if not isinstance(color, str) or not color:
        raise ConfigError(f"[highlight.{name}] color must be a non-empty string", path)
    return color


def _config_blocks(entries: Any, path: Path | None) -> list[Block]:
    if not isinstance(entries, list):
        raise ConfigError("[[highlight.blocks]] must be an array of tables", path)
    result: list[Block] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigError(f"[[highlight.blocks]] entry {i} must be a table", path)
        start = entry.get("start")
        end = entry.get("end")
        if not isinstance(start, str) or not start or not isinstance(end, str) or not end:
            raise ConfigError(
                f"[[highlight.blocks]] entry {i} needs non-empty 'start' and 'end'", path
            )
        result.append(Block(start, end, _color(entry, "blocks", BLOCK_COLOR, path)))
    return result
