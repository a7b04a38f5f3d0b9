"""
hover.py - Informação contextual ao passar o mouse (textDocument/hover)

Propósito:
    Mostra a documentação de tipos do prelúdio padrão e de operadores de
    controle quando o identificador sob o cursor casa exatamente com um label.

Mapeamento de hover:
    tipo do prelúdio (ex: tstr)     → detail da entrada
    operador de controle (ex: .size) → documentação Markdown, ou detail

Notas de implementação:
    - Identificador extraído por identifier.get_identifier_at_position
    - Prelúdio tem precedência sobre operadores de controle
    - Sem correspondência → None (não é erro)
"""

from __future__ import annotations

import logging
from typing import Optional

from lsprotocol.types import Hover, Position

from cddl_lsp.identifier import get_identifier_at_position
from cddl_lsp.keywords import find_control_operator, find_prelude

logger = logging.getLogger(__name__)


def compute_hover(source: str, position: Position) -> Optional[Hover]:
    """
    Computa hover baseado na posição do cursor.

    Args:
        source: Texto-fonte do documento
        position: Posição do cursor (0-based)

    Returns:
        Hover com o conteúdo da tabela de referência ou None
    """
    word = get_identifier_at_position(source, position)
    if not word:
        return None

    entry = find_prelude(word)
    if entry:
        return Hover(contents=entry.detail)

    entry = find_control_operator(word)
    if entry:
        return Hover(contents=entry.markup() or entry.detail)

    logger.debug(f"Hover sem correspondência para '{word}'")
    return None
