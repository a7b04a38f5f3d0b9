"""
test_definition.py - Testes para go-to-definition

Cobertura:
- Referência a regra de tipo declarada depois
- Parâmetro genérico resolvido para sua declaração
- Nome de regra tem precedência sobre parâmetro homônimo
- Regra de grupo
- Sem parse em cache, identificador desconhecido ou span fora do texto → None
- Cache defasado ainda resolve (apenas logado)
"""

from __future__ import annotations

from lsprotocol.types import Position

from cddl_lsp.cache import CachedParse
from cddl_lsp.definition import compute_definition, find_declaration
from cddl_lsp.parser import parse
from cddl_lsp.rules import GenericParam, GroupRule, Identifier, Span, TypeRule

URI = "file:///test.cddl"


def _cached(source: str, version=None) -> CachedParse:
    return CachedParse(rules=parse(source).rules, version=version)


class TestFindDeclaration:
    def test_first_match_wins(self):
        rules = [
            TypeRule(
                name=Identifier("a", Span(20, 21)),
                span=Span(20, 30),
                generic_params=(GenericParam("t", Span(22, 23)),),
            ),
            TypeRule(name=Identifier("t", Span(40, 41)), span=Span(40, 50)),
        ]
        # primeira correspondência vence: o parâmetro da regra "a" aparece antes
        assert find_declaration(rules, "t") == Span(22, 23)

    def test_rule_name_checked_first_within_rule(self):
        rule = TypeRule(
            name=Identifier("t", Span(0, 1)),
            span=Span(0, 10),
            generic_params=(GenericParam("t", Span(2, 3)),),
        )
        assert find_declaration([rule], "t") == Span(0, 1)

    def test_group_rule(self):
        rule = GroupRule(name=Identifier("g", Span(5, 6)), span=Span(5, 20))
        assert find_declaration([rule], "g") == Span(5, 6)

    def test_unknown(self):
        assert find_declaration([], "x") is None


class TestComputeDefinition:
    def test_reference_to_later_rule(self):
        source = "a = b\n\nb = tstr"
        result = compute_definition(source, Position(line=0, character=4), URI, _cached(source))

        assert result is not None
        assert result.uri == URI
        assert result.range.start == Position(line=2, character=0)
        assert result.range.end == Position(line=2, character=1)

    def test_generic_param(self):
        source = "message<t, v> = {type: t, value: v}"
        # cursor sobre o 'v' de "value: v"
        result = compute_definition(source, Position(line=0, character=33), URI, _cached(source))

        assert result.range.start == Position(line=0, character=11)
        assert result.range.end == Position(line=0, character=12)

    def test_group_rule_reference(self):
        source = "p = {g}\ng = (a: tstr)\n"
        result = compute_definition(source, Position(line=0, character=5), URI, _cached(source))
        assert result.range.start == Position(line=1, character=0)

    def test_group_rule_name(self):
        source = "p = {\n  g\n}\ng = (a: tstr)\n"
        result = compute_definition(source, Position(line=1, character=2), URI, _cached(source))
        assert result.range.start == Position(line=3, character=0)

    def test_on_declaration_itself(self):
        source = "a = tstr"
        result = compute_definition(source, Position(line=0, character=0), URI, _cached(source))
        assert result.range.start == Position(line=0, character=0)

    def test_without_cache(self):
        assert compute_definition("a = b", Position(line=0, character=4), URI, None) is None

    def test_prelude_has_no_definition(self):
        source = "a = tstr"
        assert compute_definition(source, Position(line=0, character=5), URI, _cached(source)) is None

    def test_on_space(self):
        source = "a = tstr"
        assert compute_definition(source, Position(line=0, character=1), URI, _cached(source)) is None

    def test_span_outside_current_text(self):
        cached = CachedParse(
            rules=(TypeRule(name=Identifier("b", Span(40, 41)), span=Span(40, 47)),)
        )
        assert compute_definition("a = b", Position(line=0, character=4), URI, cached) is None

    def test_stale_cache_still_resolves(self):
        source = "a = b\n\nb = tstr"
        cached = _cached(source, version=1)
        result = compute_definition(
            source, Position(line=0, character=4), URI, cached, version=5
        )
        assert result.range.start == Position(line=2, character=0)
