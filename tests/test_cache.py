"""
test_cache.py - Testes unitários para ParseCache

Propósito:
    Validar operações de cache: put, get, invalidate, has e detecção de
    parse defasado. Testes isolados, sem parser.
"""

from __future__ import annotations

from cddl_lsp.cache import CachedParse, ParseCache
from cddl_lsp.rules import GroupRule, Identifier, Span, TypeRule


def _type_rule(name: str, start: int = 0) -> TypeRule:
    ident = Identifier(name, Span(start, start + len(name)))
    return TypeRule(name=ident, span=Span(start, start + len(name) + 7))


def test_put_get():
    """Armazena e recupera regras do cache."""
    cache = ParseCache()
    cache.put("file:///a.cddl", [_type_rule("a")], version=3)

    cached = cache.get("file:///a.cddl")
    assert cached is not None
    assert cached.rules[0].name.ident == "a"
    assert cached.version == 3
    assert cached.timestamp > 0


def test_rules_stored_as_tuple():
    cache = ParseCache()
    cache.put("file:///a.cddl", [_type_rule("a")])
    assert isinstance(cache.get("file:///a.cddl").rules, tuple)


def test_get_missing():
    """get retorna None para documento não cacheado."""
    cache = ParseCache()
    assert cache.get("file:///inexistente.cddl") is None


def test_invalidate():
    """Invalida e verifica que get retorna None."""
    cache = ParseCache()
    cache.put("file:///a.cddl", [_type_rule("a")])

    cache.invalidate("file:///a.cddl")
    assert cache.get("file:///a.cddl") is None


def test_invalidate_missing():
    """Invalidar documento inexistente não levanta exceção."""
    cache = ParseCache()
    cache.invalidate("file:///inexistente.cddl")


def test_has():
    cache = ParseCache()
    assert cache.has("file:///a.cddl") is False

    cache.put("file:///a.cddl", [])
    assert cache.has("file:///a.cddl") is True

    cache.invalidate("file:///a.cddl")
    assert cache.has("file:///a.cddl") is False


def test_multiple_documents():
    """Cache isolado por documento."""
    cache = ParseCache()
    cache.put("file:///a.cddl", [_type_rule("a")])
    group = GroupRule(name=Identifier("g", Span(0, 1)), span=Span(0, 10))
    cache.put("file:///b.cddl", [group])

    cache.invalidate("file:///a.cddl")
    assert cache.get("file:///a.cddl") is None
    assert cache.get("file:///b.cddl").rules == (group,)


def test_put_overwrites():
    """Put sobrescreve resultado anterior para o mesmo documento."""
    cache = ParseCache()
    cache.put("file:///a.cddl", [_type_rule("v1")], version=1)
    cache.put("file:///a.cddl", [_type_rule("v2")], version=2)

    cached = cache.get("file:///a.cddl")
    assert cached.rules[0].name.ident == "v2"
    assert cached.version == 2


class TestStaleness:
    """Detecção de cache defasado em relação à versão do documento."""

    def test_same_version_not_stale(self):
        assert CachedParse(rules=(), version=4).is_stale(4) is False

    def test_newer_document_is_stale(self):
        assert CachedParse(rules=(), version=4).is_stale(7) is True

    def test_unknown_versions_not_stale(self):
        assert CachedParse(rules=()).is_stale(7) is False
        assert CachedParse(rules=(), version=4).is_stale(None) is False
