"""
converters.py - Conversão ParseError → Diagnostic LSP

Propósito:
    Converter erros estruturados do parser CDDL para diagnósticos do protocolo
    LSP, traduzindo offsets para posições com o próprio texto do documento.

Componentes principais:
    - build_diagnostic: ParseError → Diagnostic
    - build_diagnostics: lista de ParseError → List[Diagnostic] (com limite)
    - internal_error_diagnostic: Exception → Diagnostic genérico

Notas de implementação:
    - Severidade sempre Error; source fixo "cddl"
    - Range = (offset_to_position(start), offset_to_position(end))
    - Erros além de max_problems são descartados silenciosamente para o
      cliente (apenas logados no servidor)
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from lsprotocol.types import (
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
)

from cddl_lsp.positions import span_to_range
from cddl_lsp.rules import ParseError

logger = logging.getLogger(__name__)

DIAGNOSTIC_SOURCE = "cddl"
DEFAULT_MAX_PROBLEMS = 1000


def build_diagnostic(error: ParseError, source: str) -> Diagnostic:
    """
    Converte um ParseError em Diagnostic do LSP.

    Args:
        error: Erro estruturado do parser (mensagem + span)
        source: Texto que foi analisado (usado na tradução de offsets)

    Returns:
        Diagnostic com mensagem literal, severidade Error e range traduzido
    """
    return Diagnostic(
        range=span_to_range(source, error.span),
        severity=DiagnosticSeverity.Error,
        source=DIAGNOSTIC_SOURCE,
        message=error.message,
    )


def build_diagnostics(
    errors: Iterable[ParseError],
    source: str,
    max_problems: int = DEFAULT_MAX_PROBLEMS,
) -> List[Diagnostic]:
    """
    Converte erros do parser em diagnósticos, respeitando o limite.

    Nota:
        - Ordem dos erros é preservada
        - Um erro mal-formado vira diagnostic genérico em vez de derrubar o LSP
    """
    errors = list(errors)
    if len(errors) > max_problems:
        logger.warning(
            f"{len(errors)} erros encontrados; publicando apenas {max_problems}"
        )
        errors = errors[:max_problems]

    diagnostics: List[Diagnostic] = []
    for error in errors:
        try:
            diagnostics.append(build_diagnostic(error, source))
        except Exception as e:
            logger.warning(f"Falha ao converter erro do parser: {e}", exc_info=True)
            diagnostics.append(internal_error_diagnostic(e))
    return diagnostics


def internal_error_diagnostic(exc: Exception) -> Diagnostic:
    """Diagnostic genérico no início do documento para erros internos."""
    message = str(getattr(exc, "message", None) or exc)
    return Diagnostic(
        range=Range(
            start=Position(line=0, character=0),
            end=Position(line=0, character=1),
        ),
        severity=DiagnosticSeverity.Error,
        source="cddl-lsp",
        message=f"Erro interno ao validar documento: {message}",
    )
