"""Minimal LSP server for lexcalc: unterminated block diagnostics only."""

from __future__ import annotations

import logging

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from lexcalc import __version__
from lexcalc.highlighter import scan

logger = logging.getLogger(__name__)

server = LanguageServer(
    "lexcalc-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Scan the document and publish a warning for a block left open."""
    doc = ls.workspace.get_text_document(uri)
    result = scan(doc.source)
    diagnostics: list[Diagnostic] = []

    opened = result.dangling
    if opened is not None:
        start = opened.span.start
        end = opened.span.end
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=start.line - 1, character=start.column - 1),
                    end=Position(line=end.line - 1, character=end.column - 1),
                ),
                message=f"unterminated block {opened.text!r}",
                severity=DiagnosticSeverity.Warning,
                source="lexcalc",
            )
        )
        logger.debug("%s: unterminated block at %d:%d", uri, start.line, start.column)

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    logging.getLogger("pygls").setLevel(logging.ERROR)
    server.start_io()
