"""
definition.py - Go-to-definition para regras e parâmetros genéricos

Propósito:
    Resolve o identificador sob o cursor para o span de sua declaração,
    varrendo linearmente as regras do último parse bem-sucedido:
    - TypeRule: nome da regra, depois seus parâmetros genéricos em ordem
    - GroupRule: nome da regra

Notas de implementação:
    - Primeira correspondência vence (ordem de declaração)
    - Nome da regra é verificado antes dos parâmetros genéricos
    - Documento nunca analisado com sucesso → None
    - Span fora do texto atual (cache defasado) → None
    - Cache defasado em relação à versão do documento é apenas logado
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from lsprotocol.types import Location, Position

from cddl_lsp.identifier import get_identifier_at_position
from cddl_lsp.positions import span_in_bounds, span_to_range
from cddl_lsp.rules import GroupRule, Rule, Span, TypeRule

logger = logging.getLogger(__name__)


def find_declaration(rules: Iterable[Rule], ident: str) -> Optional[Span]:
    """
    Busca linear pela declaração de `ident`.

    Returns:
        Span do nome da regra ou do parâmetro genérico, ou None
    """
    for rule in rules:
        if isinstance(rule, TypeRule):
            if rule.name.ident == ident:
                return rule.name.span
            for param in rule.generic_params or ():
                if param.ident == ident:
                    return param.span
        elif isinstance(rule, GroupRule):
            if rule.name.ident == ident:
                return rule.name.span
    return None


def compute_definition(
    source: str,
    position: Position,
    uri: str,
    cached_parse,
    version: Optional[int] = None,
) -> Optional[Location]:
    """
    Resolve definição do identificador sob o cursor.

    Args:
        source: Texto-fonte atual do documento
        position: Posição do cursor (0-based)
        uri: URI do documento (a definição está sempre no mesmo documento)
        cached_parse: CachedParse do parse_cache (pode ser None)
        version: Versão atual do documento, para detectar cache defasado

    Returns:
        Location apontando para a declaração, ou None
    """
    if not cached_parse:
        return None

    ident = get_identifier_at_position(source, position)
    if not ident:
        return None

    span = find_declaration(cached_parse.rules, ident)
    if span is None:
        return None

    if cached_parse.is_stale(version):
        logger.debug(
            f"Definição de '{ident}' servida de parse defasado "
            f"(cache v{cached_parse.version}, documento v{version})"
        )

    if not span_in_bounds(source, span):
        logger.debug(f"Span {span} fora do texto atual de {uri}")
        return None

    return Location(uri=uri, range=span_to_range(source, span))
