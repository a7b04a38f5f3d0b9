"""
positions.py - Conversão entre offsets do texto e posições LSP

Propósito:
    Traduz offsets (índices no str do documento, como reportados pelo parser)
    para Position/Range LSP (linha 0-based, coluna em unidades UTF-16) e vice-versa.

Notas de implementação:
    - LSP conta colunas em unidades UTF-16; caracteres fora do BMP valem 2
    - Offsets além do fim do texto são limitados ao fim (clamp)
    - Linha inexistente na conversão Position → offset retorna None
    - Coluna além do fim da linha é limitada ao fim da linha (regra do LSP)
"""

from __future__ import annotations

from typing import Optional

from lsprotocol.types import Position, Range

from cddl_lsp.rules import Span


def _utf16_length(text: str) -> int:
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


def offset_to_position(text: str, offset: int) -> Position:
    """
    Converte offset do texto em Position LSP.

    Args:
        text: Texto completo do documento
        offset: Índice no str (0 ≤ offset ≤ len(text) após clamp)

    Returns:
        Position com linha 0-based e coluna UTF-16
    """
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    character = _utf16_length(text[line_start:offset])
    return Position(line=line, character=character)


def position_to_offset(text: str, position: Position) -> Optional[int]:
    """
    Converte Position LSP em offset do texto.

    Retorna None se a linha não existe no documento (posição malformada).
    """
    if position.line < 0 or position.character < 0:
        return None

    line_start = 0
    for _ in range(position.line):
        newline = text.find("\n", line_start)
        if newline == -1:
            return None
        line_start = newline + 1

    line_end = text.find("\n", line_start)
    if line_end == -1:
        line_end = len(text)

    units = 0
    offset = line_start
    while offset < line_end and units < position.character:
        units += 2 if ord(text[offset]) > 0xFFFF else 1
        offset += 1
    return offset


def span_to_range(text: str, span: Span) -> Range:
    """Converte Span [start, end) em Range LSP usando o próprio texto."""
    return Range(
        start=offset_to_position(text, span.start),
        end=offset_to_position(text, span.end),
    )


def span_in_bounds(text: str, span: Span) -> bool:
    """Verifica se o span cabe no texto atual (cache pode estar defasado)."""
    return 0 <= span.start <= span.end <= len(text)
