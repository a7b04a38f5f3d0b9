"""
test_symbols.py - Testes para document symbols (outline view)

Propósito:
    Validar extração de DocumentSymbol[] a partir das regras em cache.
    Regras de tipo viram Class (com parâmetros genéricos como filhos),
    regras de grupo viram Struct.
"""

from __future__ import annotations

from lsprotocol.types import Position, SymbolKind

from cddl_lsp.cache import CachedParse
from cddl_lsp.parser import parse
from cddl_lsp.rules import Identifier, Span, TypeRule
from cddl_lsp.symbols import compute_document_symbols


def _symbols(source: str):
    return compute_document_symbols(source, CachedParse(rules=parse(source).rules))


def test_without_cache():
    """Documento nunca analisado com sucesso retorna lista vazia."""
    assert compute_document_symbols("a = tstr", None) == []


def test_empty_document():
    assert _symbols("") == []


def test_type_and_group_rules():
    source = "person = {name: tstr}\nheader = (id: uint)\n"
    result = _symbols(source)

    assert [s.name for s in result] == ["person", "header"]
    assert result[0].kind == SymbolKind.Class
    assert result[1].kind == SymbolKind.Struct


def test_ranges():
    """range cobre a regra; selection_range cobre só o nome."""
    source = "a = tstr\nperson = {\n  name: tstr\n}\n"
    person = _symbols(source)[1]

    assert person.selection_range.start == Position(line=1, character=0)
    assert person.selection_range.end == Position(line=1, character=6)
    assert person.range.start == Position(line=1, character=0)
    assert person.range.end == Position(line=3, character=1)


def test_generic_params_as_children():
    source = "message<t, v> = [t, v]\n"
    (message,) = _symbols(source)

    assert [c.name for c in message.children] == ["t", "v"]
    assert all(c.kind == SymbolKind.TypeParameter for c in message.children)
    assert message.children[1].range.start == Position(line=0, character=11)


def test_non_generic_has_no_children():
    (rule,) = _symbols("a = tstr")
    assert rule.children is None


def test_out_of_bounds_rule_skipped():
    """Regras do cache além do texto atual são ignoradas."""
    cached = CachedParse(
        rules=(
            TypeRule(name=Identifier("a", Span(0, 1)), span=Span(0, 8)),
            TypeRule(name=Identifier("b", Span(30, 31)), span=Span(30, 38)),
        )
    )
    result = compute_document_symbols("a = tstr", cached)
    assert [s.name for s in result] == ["a"]
