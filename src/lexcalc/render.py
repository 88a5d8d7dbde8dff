"""HTML renderer: converts classified tokens to highlight markup."""

from __future__ import annotations

from collections.abc import Iterable

from lexcalc.tokens import Token, TokenKind

FONT_STYLE = "font-family:Courier New;font-size:10pt;"


def render(tokens: Iterable[Token], font_style: str = FONT_STYLE) -> str:
    """Render tokens to markup wrapped in a fixed-font container.

    A block left open at the end keeps its span open; no closing tag is
    synthesised for it.
    """
    parts: list[str] = [f'<div style="{escape_attr(font_style)}">']
    parts.extend(render_token(t) for t in tokens)
    parts.append("</div>")
    return "".join(parts)


def render_token(token: Token) -> str:
    text = plain_to_html(token.text)
    if token.kind in (TokenKind.KEYWORD, TokenKind.DIRECTIVE):
        return f'<span style="color:{escape_attr(token.color or "")}">{text}</span>'
    if token.kind == TokenKind.BLOCK_START:
        return f'<span style="color:{escape_attr(token.color or "")};">{text}'
    if token.kind == TokenKind.BLOCK_END:
        return f"{text}</span>"
    return text


# ---------------------------------------------------------------------------
# HTML escaping
# ---------------------------------------------------------------------------


def plain_to_html(text: str) -> str:
    """Escape text for a rich-text view, keeping spaces and line breaks."""
    result: list[str] = []
    for ch in text:
        if ch == " ":
            result.append("&nbsp;")
        elif ch == "\n":
            result.append("<br/>")
        elif ch == "<":
            result.append("&lt;")
        elif ch == ">":
            result.append("&gt;")
        elif ch == "&":
            result.append("&amp;")
        else:
            result.append(ch)
    return "".join(result)


def escape_attr(text: str) -> str:
    """Escape text for HTML attribute values."""
    result: list[str] = []
    for ch in text:
        if ch == "&":
            result.append("&amp;")
        elif ch == "<":
            result.append("&lt;")
        elif ch == ">":
            result.append("&gt;")
        elif ch == '"':
            result.append("&quot;")
        else:
            result.append(ch)
    return "".join(result)
