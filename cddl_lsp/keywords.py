"""
keywords.py - Tabelas de referência do prelúdio padrão e operadores de controle

Propósito:
    Dados estáticos (somente leitura) usados por completion e hover:
    - STANDARD_PRELUDE: tipos predefinidos do CDDL (RFC 8610, apêndice D)
    - CONTROL_OPERATORS: operadores de controle (RFC 8610 §3.8, RFC 9165),
      com rótulo prefixado por '.' (contexto de disparo por ponto)

Componentes principais:
    - ReferenceEntry: entrada com label, detail e documentação Markdown
    - find_prelude / find_control_operator: busca exata por label

Notas de implementação:
    - Ordem das tuplas é estável: o índice vai no `data` dos itens de completion
    - Apenas operadores de controle têm documentação Markdown
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lsprotocol.types import MarkupContent, MarkupKind


@dataclass(frozen=True)
class ReferenceEntry:
    label: str
    detail: str
    documentation: Optional[str] = None

    def markup(self) -> Optional[MarkupContent]:
        """Documentação como MarkupContent Markdown, ou None."""
        if not self.documentation:
            return None
        return MarkupContent(kind=MarkupKind.Markdown, value=self.documentation)


STANDARD_PRELUDE: tuple[ReferenceEntry, ...] = (
    ReferenceEntry("any", "any = # (qualquer item de dados CBOR)"),
    ReferenceEntry("uint", "uint = #0 (inteiro sem sinal, tipo maior 0)"),
    ReferenceEntry("nint", "nint = #1 (inteiro negativo, tipo maior 1)"),
    ReferenceEntry("int", "int = uint / nint (inteiro com ou sem sinal)"),
    ReferenceEntry("bstr", "bstr = #2 (string de bytes, tipo maior 2)"),
    ReferenceEntry("bytes", "bytes = bstr (sinônimo de bstr)"),
    ReferenceEntry("tstr", "tstr = #3 (string de texto UTF-8, tipo maior 3)"),
    ReferenceEntry("text", "text = tstr (sinônimo de tstr)"),
    ReferenceEntry("tdate", "tdate = #6.0(tstr) (data/hora em texto RFC 3339)"),
    ReferenceEntry("time", "time = #6.1(number) (data/hora em segundos desde a época)"),
    ReferenceEntry("number", "number = int / float (qualquer número)"),
    ReferenceEntry("biguint", "biguint = #6.2(bstr) (bignum sem sinal)"),
    ReferenceEntry("bignint", "bignint = #6.3(bstr) (bignum negativo)"),
    ReferenceEntry("bigint", "bigint = biguint / bignint (bignum com ou sem sinal)"),
    ReferenceEntry("integer", "integer = int / bigint (inteiro de qualquer tamanho)"),
    ReferenceEntry("unsigned", "unsigned = uint / biguint (inteiro sem sinal de qualquer tamanho)"),
    ReferenceEntry("decfrac", "decfrac = #6.4([e10: int, m: integer]) (fração decimal)"),
    ReferenceEntry("bigfloat", "bigfloat = #6.5([e2: int, m: integer]) (ponto flutuante binário)"),
    ReferenceEntry("eb64url", "eb64url = #6.21(any) (conversão esperada para base64url)"),
    ReferenceEntry("eb64legacy", "eb64legacy = #6.22(any) (conversão esperada para base64)"),
    ReferenceEntry("eb16", "eb16 = #6.23(any) (conversão esperada para base16)"),
    ReferenceEntry("encoded-cbor", "encoded-cbor = #6.24(bstr) (item CBOR codificado)"),
    ReferenceEntry("uri", "uri = #6.32(tstr) (URI)"),
    ReferenceEntry("b64url", "b64url = #6.33(tstr) (texto em base64url)"),
    ReferenceEntry("b64legacy", "b64legacy = #6.34(tstr) (texto em base64)"),
    ReferenceEntry("regexp", "regexp = #6.35(tstr) (expressão regular)"),
    ReferenceEntry("mime-message", "mime-message = #6.36(tstr) (mensagem MIME)"),
    ReferenceEntry("cbor-any", "cbor-any = #6.55799(any) (auto-descrição CBOR)"),
    ReferenceEntry("float16", "float16 = #7.25 (ponto flutuante de meia precisão)"),
    ReferenceEntry("float32", "float32 = #7.26 (ponto flutuante de precisão simples)"),
    ReferenceEntry("float64", "float64 = #7.27 (ponto flutuante de precisão dupla)"),
    ReferenceEntry("float16-32", "float16-32 = float16 / float32"),
    ReferenceEntry("float32-64", "float32-64 = float32 / float64"),
    ReferenceEntry("float", "float = float16-32 / float64 (qualquer ponto flutuante)"),
    ReferenceEntry("false", "false = #7.20 (valor simples falso)"),
    ReferenceEntry("true", "true = #7.21 (valor simples verdadeiro)"),
    ReferenceEntry("bool", "bool = false / true (booleano)"),
    ReferenceEntry("nil", "nil = #7.22 (valor simples nulo)"),
    ReferenceEntry("null", "null = nil (sinônimo de nil)"),
    ReferenceEntry("undefined", "undefined = #7.23 (valor simples indefinido)"),
)


def _control(label: str, detail: str, description: str, example: str) -> ReferenceEntry:
    doc = f"**`{label}`**\n\n{description}\n\n```cddl\n{example}\n```"
    return ReferenceEntry(label, detail, doc)


CONTROL_OPERATORS: tuple[ReferenceEntry, ...] = (
    _control(
        ".size",
        "alvo .size tamanho",
        "Limita o tamanho em bytes de uma string ou de um inteiro sem sinal.",
        "ip4 = bstr .size 4\nbyte = uint .size 1",
    ),
    _control(
        ".bits",
        "alvo .bits bits-permitidos",
        "Restringe quais bits podem estar ligados em um uint ou bstr.",
        "tcpflags = uint .bits flags\nflags = &(fin: 8, syn: 9, rst: 10)",
    ),
    _control(
        ".regexp",
        "tstr .regexp padrão",
        "Exige que a string de texto case com uma expressão regular XSD.",
        'nai = tstr .regexp "[A-Za-z0-9]+@[A-Za-z0-9]+(\\\\.[A-Za-z0-9]+)+"',
    ),
    _control(
        ".pcre",
        "tstr .pcre padrão",
        "Exige que a string de texto case com uma expressão regular PCRE.",
        'hex = tstr .pcre "^[0-9a-f]+$"',
    ),
    _control(
        ".cbor",
        "bstr .cbor tipo",
        "A string de bytes contém um item CBOR codificado que satisfaz o tipo.",
        "signed = bstr .cbor payload",
    ),
    _control(
        ".cborseq",
        "bstr .cborseq tipo",
        "A string de bytes contém uma sequência CBOR cujos itens satisfazem o array.",
        "seq = bstr .cborseq [* uint]",
    ),
    _control(
        ".within",
        "tipo1 .within tipo2",
        "O tipo da esquerda deve ser um subconjunto do tipo da direita.",
        "message = $message .within message-structure",
    ),
    _control(
        ".and",
        "tipo1 .and tipo2",
        "Interseção: o valor deve satisfazer os dois tipos.",
        "speed = number .and (0..100)",
    ),
    _control(
        ".lt",
        "alvo .lt valor",
        "Comparação numérica: menor que.",
        "small = uint .lt 10",
    ),
    _control(
        ".le",
        "alvo .le valor",
        "Comparação numérica: menor ou igual a.",
        "small = uint .le 10",
    ),
    _control(
        ".gt",
        "alvo .gt valor",
        "Comparação numérica: maior que.",
        "positive = int .gt 0",
    ),
    _control(
        ".ge",
        "alvo .ge valor",
        "Comparação numérica: maior ou igual a.",
        "natural = int .ge 0",
    ),
    _control(
        ".eq",
        "alvo .eq valor",
        "Igualdade: o valor deve ser igual ao operando da direita.",
        "version = uint .eq 1",
    ),
    _control(
        ".ne",
        "alvo .ne valor",
        "Desigualdade: o valor deve ser diferente do operando da direita.",
        "nonzero = int .ne 0",
    ),
    _control(
        ".default",
        "tipo .default valor",
        "Indica o valor assumido quando uma entrada opcional é omitida.",
        "timer = { ? timeout: uint .default 5 }",
    ),
    _control(
        ".cat",
        "texto1 .cat texto2",
        "Concatena duas strings (texto ou bytes) em uma única string (RFC 9165).",
        'greeting = "Hello " .cat name',
    ),
    _control(
        ".det",
        "texto1 .det texto2",
        "Concatenação com remoção da indentação comum (dedent) (RFC 9165).",
        'block = "" .det "\n  linha 1\n  linha 2\n"',
    ),
    _control(
        ".plus",
        "número1 .plus número2",
        "Soma numérica de dois valores constantes (RFC 9165).",
        "port = base .plus 1",
    ),
    _control(
        ".abnf",
        "tstr .abnf regras-abnf",
        "A string de texto deve casar com uma gramática ABNF (RFC 9165).",
        'date = tstr .abnf ("full-date" .det rfc3339)',
    ),
    _control(
        ".abnfb",
        "bstr .abnfb regras-abnf",
        "A string de bytes deve casar com uma gramática ABNF (RFC 9165).",
        'oid = bstr .abnfb ("oid" .det oid-abnf)',
    ),
    _control(
        ".feature",
        "tipo .feature nome",
        "Marca o uso de uma funcionalidade opcional nomeada (RFC 9165).",
        'extra = tstr .feature "extensions"',
    ),
)


def find_prelude(label: str) -> Optional[ReferenceEntry]:
    """Busca entrada do prelúdio padrão por label exato."""
    for entry in STANDARD_PRELUDE:
        if entry.label == label:
            return entry
    return None


def find_control_operator(label: str) -> Optional[ReferenceEntry]:
    """Busca operador de controle por label exato (ex: '.size')."""
    for entry in CONTROL_OPERATORS:
        if entry.label == label:
            return entry
    return None


PRELUDE_NAMES = frozenset(entry.label for entry in STANDARD_PRELUDE)
