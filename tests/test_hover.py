"""
test_hover.py - Testes para hover de prelúdio e operadores de controle
"""

from __future__ import annotations

from lsprotocol.types import MarkupContent, MarkupKind, Position

from cddl_lsp.hover import compute_hover
from cddl_lsp.keywords import find_prelude


def test_hover_prelude_type():
    source = "a = tstr\n"
    result = compute_hover(source, Position(line=0, character=5))

    assert result is not None
    assert result.contents == find_prelude("tstr").detail


def test_hover_prelude_at_word_end():
    source = "a = tstr"
    result = compute_hover(source, Position(line=0, character=8))
    assert result.contents == find_prelude("tstr").detail


def test_hover_control_operator():
    source = "ip4 = bstr .size 4\n"
    result = compute_hover(source, Position(line=0, character=13))

    assert result is not None
    assert isinstance(result.contents, MarkupContent)
    assert result.contents.kind == MarkupKind.Markdown
    assert ".size" in result.contents.value


def test_hover_user_rule_returns_none():
    source = "person = {name: tstr}\n"
    assert compute_hover(source, Position(line=0, character=2)) is None


def test_hover_on_space_returns_none():
    assert compute_hover("a = tstr", Position(line=0, character=1)) is None


def test_hover_partial_match_returns_none():
    # "tstrx" não é label do prelúdio
    assert compute_hover("a = tstrx", Position(line=0, character=5)) is None


def test_hover_missing_line_returns_none():
    assert compute_hover("a = tstr", Position(line=5, character=0)) is None


def test_hover_inside_generic_argument():
    source = "a = message<uint>"
    result = compute_hover(source, Position(line=0, character=13))
    assert result.contents == find_prelude("uint").detail
