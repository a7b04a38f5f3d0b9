"""
rules.py - Modelo tipado da AST de regras CDDL

Propósito:
    Representa o resultado do motor de parse como variantes explícitas:
    TypeRule | GroupRule para regras e ParseSuccess | ParseFailure para o
    resultado completo. A árvore crua do Lark é convertida uma única vez,
    logo após o parse, para estes tipos.

Notas de implementação:
    - Span é [start, end) em índices do str passado ao parser
    - Span de Identifier sempre cai dentro do texto que o produziu
    - Instâncias são imutáveis (frozen) e podem ser compartilhadas no cache
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple, Union


class Span(NamedTuple):
    """Intervalo semiaberto [start, end) de offsets no texto."""

    start: int
    end: int

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end


@dataclass(frozen=True)
class Identifier:
    ident: str
    span: Span


@dataclass(frozen=True)
class GenericParam:
    ident: str
    span: Span


@dataclass(frozen=True)
class TypeRule:
    """Regra de tipo: `nome<params> = tipo` ou `nome /= tipo`."""

    name: Identifier
    span: Span
    generic_params: Optional[Tuple[GenericParam, ...]] = None


@dataclass(frozen=True)
class GroupRule:
    """Regra de grupo: `nome = (entradas)` ou `nome //= entrada`."""

    name: Identifier
    span: Span


Rule = Union[TypeRule, GroupRule]


@dataclass(frozen=True)
class ParseError:
    message: str
    span: Span


@dataclass(frozen=True)
class ParseSuccess:
    rules: Tuple[Rule, ...]


@dataclass(frozen=True)
class ParseFailure:
    errors: Tuple[ParseError, ...]


ParseResult = Union[ParseSuccess, ParseFailure]
