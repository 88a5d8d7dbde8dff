"""Shared test fixtures and helpers."""

from __future__ import annotations

import html
import re

import pytest

from lexcalc.highlighter import scan
from lexcalc.tokens import TokenKind

_TAG = re.compile(r"<span[^>]*>|</span>|<div[^>]*>|</div>")


@pytest.fixture
def toks():
    """Return a helper that scans source and returns (kind, text) pairs."""

    def _toks(source: str, rules=None) -> list[tuple[TokenKind, str]]:
        return [(t.kind, t.text) for t in scan(source, rules).tokens]

    return _toks


@pytest.fixture
def strip_markup():
    """Return a helper that turns highlight markup back into plain text."""

    def _strip(markup: str) -> str:
        text = _TAG.sub("", markup)
        text = text.replace("<br/>", "\n").replace("&nbsp;", " ")
        return html.unescape(text)

    return _strip
