"""
symbols.py - Document symbols (outline view) para arquivos CDDL

Propósito:
    Produz DocumentSymbol[] a partir das regras do último parse bem-sucedido,
    exibidas pelo editor como outline/breadcrumb.

Mapeamento de regras → LSP SymbolKind:
    TypeRule     → Class (parâmetros genéricos como children TypeParameter)
    GroupRule    → Struct

Notas de implementação:
    - range cobre a regra inteira; selection_range cobre o nome
    - Sem parse em cache, retorna lista vazia (sem reanalisar)
    - Spans fora do texto atual são ignorados (cache defasado)
"""

from __future__ import annotations

import logging
from typing import List

from lsprotocol.types import DocumentSymbol, SymbolKind

from cddl_lsp.positions import span_in_bounds, span_to_range
from cddl_lsp.rules import TypeRule

logger = logging.getLogger(__name__)


def compute_document_symbols(source: str, cached_parse) -> List[DocumentSymbol]:
    """Computa document symbols para um arquivo CDDL."""
    if not cached_parse:
        return []

    symbols: List[DocumentSymbol] = []
    for rule in cached_parse.rules:
        if not span_in_bounds(source, rule.span) or not span_in_bounds(source, rule.name.span):
            continue

        children = None
        if isinstance(rule, TypeRule):
            kind = SymbolKind.Class
            if rule.generic_params:
                children = [
                    DocumentSymbol(
                        name=param.ident,
                        kind=SymbolKind.TypeParameter,
                        range=span_to_range(source, param.span),
                        selection_range=span_to_range(source, param.span),
                    )
                    for param in rule.generic_params
                    if span_in_bounds(source, param.span)
                ]
        else:
            kind = SymbolKind.Struct

        symbols.append(
            DocumentSymbol(
                name=rule.name.ident,
                kind=kind,
                range=span_to_range(source, rule.span),
                selection_range=span_to_range(source, rule.name.span),
                children=children or None,
            )
        )

    return symbols
