"""
test_completion.py - Testes para autocomplete em duas fases

Cobertura:
- Lista de operadores de controle após '.'
- Lista do prelúdio padrão nos demais casos
- Contexto embutido no `data` de cada item
- Resolve: insert_text sem '.' (operador) e detail (prelúdio)
- Itens com data inválida voltam inalterados
"""

from __future__ import annotations

from types import SimpleNamespace

from lsprotocol.types import CompletionItem, CompletionItemKind, MarkupContent, Position

from cddl_lsp.completion import (
    CompletionContext,
    compute_completions,
    detect_context,
    resolve_completion,
)
from cddl_lsp.keywords import CONTROL_OPERATORS, STANDARD_PRELUDE


class TestDetectContext:
    def test_after_dot(self):
        source = "ip = bstr ."
        assert detect_context(source, Position(line=0, character=11)) is CompletionContext.CONTROL_OPERATOR

    def test_plain_position(self):
        source = "a = t"
        assert detect_context(source, Position(line=0, character=5)) is CompletionContext.STANDARD_PRELUDE

    def test_start_of_line(self):
        source = "a = b.\nc"
        assert detect_context(source, Position(line=1, character=0)) is CompletionContext.STANDARD_PRELUDE

    def test_missing_line(self):
        assert detect_context("a", Position(line=4, character=2)) is CompletionContext.STANDARD_PRELUDE


class TestCompletionList:
    def test_control_operators_after_dot(self):
        result = compute_completions("ip = bstr .", Position(line=0, character=11))

        assert result.is_incomplete is False
        assert len(result.items) == len(CONTROL_OPERATORS)
        assert [i.label for i in result.items] == [e.label for e in CONTROL_OPERATORS]
        for item in result.items:
            assert item.kind == CompletionItemKind.Keyword
            assert item.data["context"] == "control"
            assert isinstance(item.documentation, MarkupContent)

    def test_prelude_without_dot(self):
        result = compute_completions("a = ", Position(line=0, character=4))

        assert len(result.items) == len(STANDARD_PRELUDE)
        labels = {i.label for i in result.items}
        assert "tstr" in labels
        for index, item in enumerate(result.items):
            assert item.data == {"context": "prelude", "index": index}
            assert item.detail is None
            assert item.documentation is None

    def test_sequential_requests_do_not_leak_context(self):
        compute_completions("a = b .", Position(line=0, character=7))
        result = compute_completions("a = ", Position(line=0, character=4))
        assert all(i.data["context"] == "prelude" for i in result.items)


class TestResolve:
    def test_control_operator_strips_dot(self):
        items = compute_completions("a = b .", Position(line=0, character=7)).items
        size = next(i for i in items if i.label == ".size")

        resolved = resolve_completion(size)
        assert resolved.insert_text == "size"

    def test_every_control_operator(self):
        items = compute_completions("a = b .", Position(line=0, character=7)).items
        for item in items:
            assert resolve_completion(item).insert_text == item.label[1:]

    def test_prelude_detail(self):
        items = compute_completions("a = ", Position(line=0, character=4)).items
        tstr = next(i for i in items if i.label == "tstr")

        resolved = resolve_completion(tstr)
        assert resolved.detail == STANDARD_PRELUDE[tstr.data["index"]].detail
        assert resolved.insert_text is None

    def test_data_as_object(self):
        item = CompletionItem(label="uint", data=SimpleNamespace(context="prelude", index=1))
        assert resolve_completion(item).detail == STANDARD_PRELUDE[1].detail

    def test_missing_data_unchanged(self):
        item = CompletionItem(label="x")
        resolved = resolve_completion(item)
        assert resolved.detail is None
        assert resolved.insert_text is None

    def test_invalid_data_unchanged(self):
        for data in (
            {"context": "outro", "index": 0},
            {"context": "prelude", "index": -1},
            {"context": "prelude", "index": "0"},
            {"context": "prelude", "index": 9999},
            {"context": "control", "index": True},
        ):
            item = CompletionItem(label=".x", data=data)
            resolved = resolve_completion(item)
            assert resolved.detail is None
            assert resolved.insert_text is None
