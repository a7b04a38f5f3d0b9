"""
cache.py - Cache do último parse bem-sucedido por documento

Propósito:
    Armazena as regras do último parse sem erros de cada documento para
    servir go-to-definition e document symbols sem reanalisar o texto.

Componentes principais:
    - CachedParse: regras + versão do documento que as produziu + timestamp
    - ParseCache: dicionário de cache por URI

Notas de implementação:
    - Só o pipeline de validação escreve no cache
    - Parse com erros NÃO invalida o cache: o último resultado válido
      continua servindo definição (possivelmente defasado)
    - is_stale() compara a versão em cache com a versão atual do documento
    - Fechar o documento remove a entrada
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Tuple

from cddl_lsp.rules import Rule

logger = logging.getLogger(__name__)


@dataclass
class CachedParse:
    """Regras de um parse bem-sucedido, com versão e timestamp."""

    rules: Tuple[Rule, ...]
    version: Optional[int] = None
    timestamp: float = field(default_factory=time.time)

    def is_stale(self, version: Optional[int]) -> bool:
        """True se o documento já está numa versão posterior à do cache."""
        if version is None or self.version is None:
            return False
        return self.version < version


class ParseCache:
    """Cache de CachedParse por URI de documento."""

    def __init__(self):
        self._cache: dict[str, CachedParse] = {}

    def get(self, uri: str) -> Optional[CachedParse]:
        """Retorna parse em cache para o documento, ou None."""
        return self._cache.get(uri)

    def put(self, uri: str, rules, version: Optional[int] = None) -> None:
        """Armazena o resultado de um parse bem-sucedido."""
        self._cache[uri] = CachedParse(rules=tuple(rules), version=version)
        logger.debug(f"Cache atualizado para {uri} (versão {version}, {len(rules)} regras)")

    def invalidate(self, uri: str) -> None:
        """Remove o parse em cache do documento."""
        if self._cache.pop(uri, None):
            logger.info(f"Cache invalidado para documento: {uri}")

    def has(self, uri: str) -> bool:
        """Verifica se há parse em cache para o documento."""
        return uri in self._cache
