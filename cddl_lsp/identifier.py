"""
identifier.py - Extração do identificador sob o cursor

Propósito:
    Determina o trecho contíguo ao redor de um offset que forma o token
    sob (ou adjacente ao) cursor, sem depender de tokenizador do parser.
    Base comum para hover e go-to-definition.

Notas de implementação:
    - Delimitadores diferem por direção: a varredura para a esquerda para
      em '{' mas não em ','; a varredura para a direita para em ',' mas não em '{'
    - '\\r' delimita nos dois sentidos (documentos CRLF)
    - Offset além do fim do texto ou sobre espaço → None
    - O token retornado nunca contém delimitador da esquerda, mesmo quando a
      varredura chega ao início do texto
"""

from __future__ import annotations

from typing import Optional

from lsprotocol.types import Position

from cddl_lsp.positions import position_to_offset
from cddl_lsp.rules import Span

_LEFT_STOPS = frozenset(" <>{}\n\r")
_RIGHT_STOPS = frozenset(" ,<>}\n\r")


def _char_at(text: str, index: int) -> str:
    return text[index] if 0 <= index < len(text) else ""


def identifier_bounds(text: str, offset: int) -> Optional[Span]:
    """
    Calcula os limites [start, end) do identificador no offset.

    Args:
        text: Texto completo do documento
        offset: Offset do cursor

    Returns:
        Span do identificador ou None (espaço, fora do texto, token vazio)
    """
    if offset < 0 or offset > len(text) or _char_at(text, offset) == " ":
        return None

    start = offset
    while start > 0 and _char_at(text, start) not in _LEFT_STOPS:
        start -= 1
    if _char_at(text, start) in _LEFT_STOPS:
        start += 1

    end = offset
    while end < len(text) and text[end] not in _RIGHT_STOPS:
        end += 1

    if start >= end:
        return None
    return Span(start, end)


def get_identifier_at_offset(text: str, offset: int) -> Optional[str]:
    """Retorna o identificador no offset, ou None."""
    bounds = identifier_bounds(text, offset)
    if bounds is None:
        return None
    return text[bounds.start:bounds.end]


def get_identifier_at_position(text: str, position: Position) -> Optional[str]:
    """Retorna o identificador na Position LSP (posição malformada → None)."""
    offset = position_to_offset(text, position)
    if offset is None:
        return None
    return get_identifier_at_offset(text, offset)
