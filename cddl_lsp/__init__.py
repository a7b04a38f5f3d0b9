"""
cddl_lsp - Language Server Protocol para CDDL (RFC 8610)

Propósito:
    Servidor LSP que fornece validação em tempo real, completion, hover e
    go-to-definition para arquivos CDDL no VSCode e outros editores compatíveis.

Componentes principais:
    - server: Servidor principal usando pygls
    - parser: Motor de parse CDDL (Lark) → regras ou erros estruturados
    - converters: Conversão ParseError → LSP Diagnostic

Dependências críticas:
    - pygls: Framework LSP
    - lark: Gramática e parser Earley

Exemplo de uso:
    cddl-lsp

Notas de implementação:
    - Comunica via STDIO com o cliente
    - Sincronização completa de documento; cada mudança reanalisa o buffer
"""
from importlib.metadata import PackageNotFoundError, version as _pkg_version
from pathlib import Path
import re


def _read_version_from_pyproject() -> str:
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    try:
        text = pyproject.read_text(encoding="utf-8")
    except OSError:
        return "0.0.0"
    match = re.search(r'(?m)^version = "([^"]+)"\s*$', text)
    return match.group(1) if match else "0.0.0"


try:
    __version__ = _pkg_version("cddl-lsp")
except PackageNotFoundError:
    __version__ = _read_version_from_pyproject()

__all__ = ["server", "parser", "converters"]
