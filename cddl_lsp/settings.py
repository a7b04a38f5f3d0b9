"""
settings.py - Configuração do servidor vinda de workspace/didChangeConfiguration

Propósito:
    Interpreta a seção "cddl" das configurações do cliente:
    - cddl.maxNumberOfProblems: limite de diagnósticos por validação (padrão 1000)
    - cddl.validation.enabled: liga/desliga validação em tempo real (padrão True)

Notas de implementação:
    - settings pode vir como {"cddl": {...}} ou já ser a própria seção
    - Valores ausentes ou inválidos caem no padrão (nunca lança exceção)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cddl_lsp.converters import DEFAULT_MAX_PROBLEMS

logger = logging.getLogger(__name__)

SETTINGS_SECTION = "cddl"


@dataclass
class ServerSettings:
    max_number_of_problems: int = DEFAULT_MAX_PROBLEMS
    validation_enabled: bool = True


def parse_settings(settings) -> ServerSettings:
    """Converte params.settings do cliente em ServerSettings."""
    result = ServerSettings()
    if not isinstance(settings, dict):
        return result

    section = settings.get(SETTINGS_SECTION, settings)
    if not isinstance(section, dict):
        return result

    max_problems = section.get("maxNumberOfProblems")
    if isinstance(max_problems, int) and not isinstance(max_problems, bool) and max_problems > 0:
        result.max_number_of_problems = max_problems
    elif max_problems is not None:
        logger.warning(f"maxNumberOfProblems inválido: {max_problems!r}; usando padrão")

    validation = section.get("validation", {})
    if isinstance(validation, dict):
        enabled = validation.get("enabled", True)
        result.validation_enabled = enabled if isinstance(enabled, bool) else True

    return result
