"""
parser.py - Motor de parse/validação CDDL baseado em Lark

Propósito:
    Ponto de entrada único consumido pelo pipeline de validação:
    parse(text) → ParseSuccess(rules) | ParseFailure(errors).
    Converte a árvore crua do Lark para o modelo tipado de rules.py.

Componentes principais:
    - split_rules: divide o documento em trechos, um por regra de nível superior
    - parse: analisa cada trecho com a gramática cddl.lark e agrega erros
    - _humanize_expected: tokens Lark esperados → texto legível

Notas de implementação:
    - Uma regra começa na coluna 0 com um cabeçalho `nome<params> =` (ou
      `/=`, `//=`), fora de colchetes/chaves/parênteses, strings e comentários;
      outras linhas na coluna 0 continuam a regra anterior
    - Cada trecho é analisado isoladamente: vários erros por passada
    - Offsets dos erros/spans são relativos ao texto completo
    - Referências a nomes indefinidos só são verificadas se não há erro de sintaxe
    - Nomes de socket ($nome, $$nome) podem ficar indefinidos
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput

from cddl_lsp.keywords import PRELUDE_NAMES
from cddl_lsp.rules import (
    GenericParam,
    GroupRule,
    Identifier,
    ParseError,
    ParseFailure,
    ParseResult,
    ParseSuccess,
    Rule,
    Span,
    TypeRule,
)

logger = logging.getLogger(__name__)

_PARSER = Lark.open(
    "cddl.lark",
    rel_to=__file__,
    parser="earley",
    propagate_positions=True,
)

# Cabeçalho de regra: nome, parâmetros genéricos opcionais e atribuição
_RULE_HEAD = re.compile(
    r"[A-Za-z@_$](?:[-.]*[A-Za-z@_$0-9])*"
    r"(?:[ \t]*<[^<>\n]*>)?"
    r"[ \t]*(?://=|/=|=(?!>))"
)
_BLANK = re.compile(r"(?:\s+|;[^\n]*)*\Z")

# Entrada com ocorrência ou chave de membro só pode ser grupo
_GROUP_MARKERS = {"occur", "key_type", "key_bare", "key_value"}

# Mapeamento de nomes de tokens Lark para nomes legíveis
_TOKEN_NAMES = {
    "ID": "identificador",
    "ASSIGN": "'='",
    "NUMBER": "número",
    "TEXT": "texto entre aspas",
    "BYTES": "string de bytes",
    "OCCUR": "indicador de ocorrência",
    "RANGEOP": "'..'",
    "CTLOP": "operador de controle",
    "TAG": "tag '#6'",
    "MAJOR": "tipo maior '#n'",
    "_GROUPCHOICE": "'//'",
    "_ARROW": "'=>'",
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "LPAR": "'('",
    "RPAR": "')'",
    "LSQB": "'['",
    "RSQB": "']'",
    "LESSTHAN": "'<'",
    "MORETHAN": "'>'",
    "COMMA": "','",
    "COLON": "':'",
    "SLASH": "'/'",
    "TILDE": "'~'",
    "AMPERSAND": "'&'",
    "CIRCUMFLEX": "'^'",
    "HASH": "'#'",
}


def parse(text: str) -> ParseResult:
    """
    Analisa um documento CDDL completo.

    Args:
        text: Texto integral do buffer

    Returns:
        ParseSuccess com as regras em ordem de declaração, ou
        ParseFailure com todos os erros encontrados (ordenados por offset)
    """
    rules: List[Rule] = []
    errors: List[ParseError] = []
    scopes: List[Tuple[frozenset, List[Identifier]]] = []

    for start, end in split_rules(text):
        chunk = text[start:end]
        try:
            tree = _PARSER.parse(chunk)
        except UnexpectedInput as exc:
            errors.append(_syntax_error(exc, chunk, start))
            continue

        rule, params, references = _build_rule(tree, start)
        rules.append(rule)
        scopes.append((params, references))

    if not errors:
        defined = {rule.name.ident for rule in rules}
        for params, references in scopes:
            for ref in references:
                if ref.ident in defined or ref.ident in params:
                    continue
                if ref.ident in PRELUDE_NAMES or ref.ident.startswith("$"):
                    continue
                errors.append(
                    ParseError(f"definição ausente para a regra '{ref.ident}'", ref.span)
                )

    if errors:
        errors.sort(key=lambda error: error.span.start)
        logger.debug(f"Parse falhou com {len(errors)} erros")
        return ParseFailure(errors=tuple(errors))

    logger.debug(f"Parse concluído: {len(rules)} regras")
    return ParseSuccess(rules=tuple(rules))


def split_rules(text: str) -> List[Tuple[int, int]]:
    """
    Divide o texto em intervalos [start, end), um por regra de nível superior.

    Conteúdo antes da primeira regra que não seja espaço ou comentário vira
    um trecho próprio (que falhará no parse e gerará diagnóstico).
    """
    starts: List[int] = []
    depth = 0
    at_line_start = True
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if at_line_start and depth == 0 and _RULE_HEAD.match(text, i):
            starts.append(i)
        at_line_start = ch == "\n"

        if ch == ";":
            newline = text.find("\n", i)
            i = n if newline == -1 else newline
            continue
        if ch == '"' or ch == "'":
            i = _skip_string(text, i)
            continue
        if ch in "({[":
            depth += 1
        elif ch in ")}]":
            depth = max(depth - 1, 0)
        i += 1

    if not starts or starts[0] > 0:
        prefix_end = starts[0] if starts else n
        if not _BLANK.match(text, 0, prefix_end):
            starts.insert(0, 0)

    bounds = starts[1:] + [n]
    return list(zip(starts, bounds))


def _skip_string(text: str, i: int) -> int:
    """Retorna o índice após a string que começa em i (texto não cruza linhas)."""
    quote = text[i]
    j = i + 1
    while j < len(text):
        ch = text[j]
        if ch == "\\":
            j += 2
            continue
        if ch == quote:
            return j + 1
        if ch == "\n" and quote == '"':
            return j
        j += 1
    return len(text)


def _build_rule(tree: Tree, offset: int) -> Tuple[Rule, frozenset, List[Identifier]]:
    """Converte a árvore Lark de uma regra em TypeRule/GroupRule."""
    name_token = tree.children[0]
    name = Identifier(str(name_token), _token_span(name_token, offset))

    params: Optional[Tuple[GenericParam, ...]] = None
    assign = "="
    entry: Optional[Tree] = None
    for child in tree.children[1:]:
        if isinstance(child, Token):
            if child.type == "ASSIGN":
                assign = str(child)
        elif child.data == "genericparm":
            params = tuple(
                GenericParam(str(tok), _token_span(tok, offset))
                for tok in child.children
                if isinstance(tok, Token)
            )
        else:
            entry = child

    end = getattr(tree.meta, "end_pos", None)
    span = Span(name.span.start, offset + end if end is not None else name.span.end)

    if _is_group_rule(assign, entry):
        rule: Rule = GroupRule(name=name, span=span)
    else:
        rule = TypeRule(name=name, span=span, generic_params=params)

    param_names = frozenset(p.ident for p in params or ())
    return rule, param_names, _collect_references(entry, offset)


def _is_group_rule(assign: str, entry: Optional[Tree]) -> bool:
    if assign == "//=":
        return True
    if assign == "/=" or entry is None:
        return False
    return not _is_plain_type(entry)


def _is_plain_type(entry: Tree) -> bool:
    """
    Verifica se a entrada de grupo é, na verdade, um tipo simples.

    `(tstr)` é tipo entre parênteses; `(a: tstr)` e `(a, b)` são grupos.
    """
    parts = [c for c in entry.children if isinstance(c, Tree)]
    if any(part.data in _GROUP_MARKERS for part in parts):
        return False
    if entry.data == "entry_type":
        return True

    group = parts[-1]
    choices = [c for c in group.children if isinstance(c, Tree)]
    if len(choices) != 1:
        return False
    entries = [c for c in choices[0].children if isinstance(c, Tree)]
    return len(entries) == 1 and _is_plain_type(entries[0])


def _collect_references(entry: Optional[Tree], offset: int) -> List[Identifier]:
    if entry is None:
        return []
    references = [
        Identifier(str(node.children[0]), _token_span(node.children[0], offset))
        for node in entry.iter_subtrees_topdown()
        if node.data == "typename"
    ]
    references.sort(key=lambda ref: ref.span.start)
    return references


def _token_span(token: Token, offset: int) -> Span:
    return Span(offset + token.start_pos, offset + token.end_pos)


def _syntax_error(exc: UnexpectedInput, chunk: str, offset: int) -> ParseError:
    """Converte exceção do Lark em ParseError com offsets absolutos."""
    if isinstance(exc, UnexpectedCharacters):
        pos = offset + exc.pos_in_stream
        message = f"Caractere inesperado {exc.char!r}"
        expected = _humanize_expected(exc.allowed or ())
        span = Span(pos, pos + 1)
    elif isinstance(exc, UnexpectedEOF):
        content_end = offset + len(chunk.rstrip())
        message = "Regra incompleta: fim inesperado"
        expected = _humanize_expected(exc.expected or ())
        span = Span(content_end, min(content_end + 1, offset + len(chunk)))
    else:
        pos = offset + max(getattr(exc, "pos_in_stream", 0) or 0, 0)
        message = "Erro de sintaxe"
        expected = None
        span = Span(pos, min(pos + 1, offset + len(chunk)))

    if expected:
        message = f"{message}\n\nEsperado: {expected}"
    return ParseError(message=message, span=span)


def _humanize_expected(expected: Iterable) -> Optional[str]:
    """
    Converte lista de tokens esperados em texto legível.

    Args:
        expected: Nomes de tokens Lark (ex: ['ID', 'LBRACE'])

    Returns:
        String humanizada ou None se nada legível
    """
    humanized = set()
    for token in expected:
        name = getattr(token, "name", token)
        if name in _TOKEN_NAMES:
            humanized.add(_TOKEN_NAMES[name])
        elif not str(name).startswith("__"):
            humanized.add(str(name))

    if not humanized:
        return None

    ordered = sorted(humanized)
    if len(ordered) == 1:
        return ordered[0]
    return ", ".join(ordered[:-1]) + f" ou {ordered[-1]}"
