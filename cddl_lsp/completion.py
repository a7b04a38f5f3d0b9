"""
completion.py - Autocomplete de tipos do prelúdio e operadores de controle

Propósito:
    Completion em duas fases:
    - Lista: após '.', operadores de controle; caso contrário, prelúdio padrão
    - Resolve: preenche detail (prelúdio) ou insert_text (operador de controle)

Notas de implementação:
    - O contexto (tabela de origem) viaja no `data` de cada item:
      {"context": "control" | "prelude", "index": i}; não há flag global,
      então listas pedidas em sequência não se contaminam
    - Operadores de controle já levam a documentação (barata) na lista
    - insert_text de operador remove o '.' inicial, já digitado pelo usuário
    - CompletionItemKind.Keyword para todos os itens
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    Position,
)

from cddl_lsp.keywords import CONTROL_OPERATORS, STANDARD_PRELUDE
from cddl_lsp.positions import position_to_offset

logger = logging.getLogger(__name__)

CONTROL_TRIGGER = "."


class CompletionContext(str, Enum):
    CONTROL_OPERATOR = "control"
    STANDARD_PRELUDE = "prelude"


def detect_context(source: str, position: Position) -> CompletionContext:
    """Decide a tabela pelo caractere imediatamente antes do cursor (mesma linha)."""
    if position.character <= 0:
        return CompletionContext.STANDARD_PRELUDE

    offset = position_to_offset(source, position)
    if offset is None or offset == 0:
        return CompletionContext.STANDARD_PRELUDE

    if source[offset - 1] == CONTROL_TRIGGER:
        return CompletionContext.CONTROL_OPERATOR
    return CompletionContext.STANDARD_PRELUDE


def compute_completions(source: str, position: Position) -> CompletionList:
    """
    Computa lista de completamento.

    Args:
        source: Texto-fonte do documento
        position: Posição do cursor (0-based)

    Returns:
        CompletionList com um item por entrada da tabela escolhida
    """
    context = detect_context(source, position)
    items: list[CompletionItem] = []

    if context is CompletionContext.CONTROL_OPERATOR:
        for index, entry in enumerate(CONTROL_OPERATORS):
            items.append(
                CompletionItem(
                    label=entry.label,
                    kind=CompletionItemKind.Keyword,
                    data=_item_data(context, index),
                    documentation=entry.markup(),
                )
            )
    else:
        for index, entry in enumerate(STANDARD_PRELUDE):
            items.append(
                CompletionItem(
                    label=entry.label,
                    kind=CompletionItemKind.Keyword,
                    data=_item_data(context, index),
                )
            )

    logger.debug(f"Completion ({context.value}): {len(items)} itens")
    return CompletionList(is_incomplete=False, items=items)


def resolve_completion(item: CompletionItem) -> CompletionItem:
    """
    Resolve campos preguiçosos de um item devolvido pela lista.

    Item com data desconhecida ou inválida é devolvido sem alteração.
    """
    parsed = _parse_item_data(item.data)
    if parsed is None:
        return item

    context, index = parsed
    if context is CompletionContext.CONTROL_OPERATOR:
        if index < len(CONTROL_OPERATORS):
            item.insert_text = item.label[1:]
        return item

    if index < len(STANDARD_PRELUDE):
        item.detail = STANDARD_PRELUDE[index].detail
    return item


def _item_data(context: CompletionContext, index: int) -> dict:
    return {"context": context.value, "index": index}


def _parse_item_data(data) -> Optional[tuple[CompletionContext, int]]:
    """Lê (contexto, índice) do `data` do item; aceita dict ou objeto com atributos."""
    if data is None:
        return None

    if isinstance(data, dict):
        raw_context = data.get("context")
        raw_index = data.get("index")
    else:
        raw_context = getattr(data, "context", None)
        raw_index = getattr(data, "index", None)

    try:
        context = CompletionContext(raw_context)
    except ValueError:
        return None

    if isinstance(raw_index, bool) or not isinstance(raw_index, int) or raw_index < 0:
        return None
    return context, raw_index
