"""
server.py - Servidor LSP principal para CDDL usando pygls

Propósito:
    Servidor Language Server Protocol que fornece validação em tempo real,
    completion, hover, go-to-definition e outline para arquivos CDDL (.cddl).

Componentes principais:
    - CddlLanguageServer: Servidor principal com pygls
    - validate_document: Pipeline de validação (parse → diagnósticos)
    - Event handlers: did_open, did_change, did_close, configuração

Dependências críticas:
    - pygls: Framework LSP
    - lark: Motor de parse (via cddl_lsp.parser)
    - cddl_lsp.converters: Conversão ParseError → Diagnostic

Exemplo de uso:
    cddl-lsp

Notas de implementação:
    - Comunica via STDIO (entrada/saída padrão)
    - Sincronização de documento completa (TextDocumentSyncKind.Full)
    - Cada mudança reanalisa o buffer inteiro (sem parse incremental)
    - Último parse bem-sucedido fica em cache para definição e outline
    - Tratamento robusto de exceções (nunca crasha)
    - Validação pode ser desabilitada via cddl.validation.enabled
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from lsprotocol.types import (
    COMPLETION_ITEM_RESOLVE,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    CompletionItem,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    DefinitionParams,
    DidChangeConfigurationParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbolParams,
    HoverParams,
    TextDocumentSyncKind,
)
from pygls.server import LanguageServer

from cddl_lsp import __version__
from cddl_lsp.cache import ParseCache
from cddl_lsp.completion import CONTROL_TRIGGER, compute_completions, resolve_completion
from cddl_lsp.converters import build_diagnostics, internal_error_diagnostic
from cddl_lsp.definition import compute_definition
from cddl_lsp.hover import compute_hover
from cddl_lsp.parser import parse as parse_cddl
from cddl_lsp.rules import ParseFailure
from cddl_lsp.settings import ServerSettings, parse_settings
from cddl_lsp.symbols import compute_document_symbols

# Configuração de logging (stderr; stdout é do protocolo)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class CddlLanguageServer(LanguageServer):
    """
    Servidor LSP especializado para CDDL.

    Attributes:
        open_documents: URIs abertos, usados para revalidar após mudança de configuração
        settings: Configuração atual (limite de diagnósticos, validação ligada)
        parse_cache: Último parse bem-sucedido por URI (definição e outline)
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.open_documents: set[str] = set()
        self.settings: ServerSettings = ServerSettings()
        self.parse_cache: ParseCache = ParseCache()


# Instância global do servidor
server = CddlLanguageServer(
    "cddl-lsp",
    f"v{__version__}",
    text_document_sync_kind=TextDocumentSyncKind.Full,
)


def validate_document(ls: CddlLanguageServer, uri: str) -> None:
    """
    Valida um documento CDDL e publica diagnósticos.

    Args:
        ls: Instância do servidor
        uri: URI do documento a validar

    Fluxo:
        1. Verifica se validação está habilitada (cddl.validation.enabled)
        2. Obtém texto integral do documento
        3. Analisa com o parser (texto completo, sem parse incremental)
        4. Falha → ParseError[] convertidos em Diagnostic[] (até o limite)
           Sucesso → diagnósticos vazios e regras gravadas no parse_cache
        5. Publica diagnósticos via ls.publish_diagnostics(), substituindo os anteriores

    Tratamento de Erros:
        - Parse com erro NÃO remove o último parse válido do cache
        - Exceção inesperada é logada e vira um diagnostic genérico
    """
    if not ls.settings.validation_enabled:
        logger.debug(f"Validação desabilitada, pulando: {uri}")
        ls.publish_diagnostics(uri, [])
        return

    try:
        doc = ls.workspace.get_text_document(uri)
        source = doc.source
        version = getattr(doc, "version", None)

        result = parse_cddl(source)

        if isinstance(result, ParseFailure):
            diagnostics = build_diagnostics(
                result.errors, source, ls.settings.max_number_of_problems
            )
        else:
            diagnostics = []
            ls.parse_cache.put(uri, result.rules, version)

        ls.publish_diagnostics(uri, diagnostics, version=version)

        logger.info(f"Validação completa: {uri} (v{version}) - {len(diagnostics)} erros")

    except Exception as e:
        logger.error(f"Erro ao validar {uri}: {e}", exc_info=True)
        ls.publish_diagnostics(uri, [internal_error_diagnostic(e)])


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: CddlLanguageServer, params: DidOpenTextDocumentParams) -> None:
    """Valida imediatamente quando o usuário abre um arquivo CDDL."""
    logger.info(f"Documento aberto: {params.text_document.uri}")
    ls.open_documents.add(params.text_document.uri)
    validate_document(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: CddlLanguageServer, params: DidChangeTextDocumentParams) -> None:
    """
    Handler para mudanças no documento.

    O pygls já aplicou o texto completo ao workspace antes desta chamada.
    """
    logger.debug(f"Documento modificado: {params.text_document.uri}")
    validate_document(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: CddlLanguageServer, params: DidCloseTextDocumentParams) -> None:
    """
    Handler para fechamento de documento.

    Limpa diagnósticos, remove do rastreamento e descarta o parse em cache.
    """
    uri = params.text_document.uri
    logger.info(f"Documento fechado: {uri}")

    ls.publish_diagnostics(uri, [])
    ls.open_documents.discard(uri)
    ls.parse_cache.invalidate(uri)


@server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: CddlLanguageServer, params: DidChangeConfigurationParams
) -> None:
    """
    Handler para mudanças na configuração do workspace.

    Atualiza cddl.maxNumberOfProblems e cddl.validation.enabled.
    Validação desativada → limpa diagnósticos dos documentos abertos;
    caso contrário revalida todos os documentos abertos.
    """
    try:
        ls.settings = parse_settings(params.settings)
        logger.info(
            f"Configuração atualizada: validation.enabled = {ls.settings.validation_enabled}, "
            f"maxNumberOfProblems = {ls.settings.max_number_of_problems}"
        )

        for doc_uri in list(ls.open_documents):
            if ls.settings.validation_enabled:
                validate_document(ls, doc_uri)
            else:
                ls.publish_diagnostics(doc_uri, [])

    except Exception as e:
        logger.error(f"Erro ao processar mudança de configuração: {e}", exc_info=True)


@server.feature(
    TEXT_DOCUMENT_COMPLETION,
    CompletionOptions(trigger_characters=[CONTROL_TRIGGER], resolve_provider=True),
)
def completion(ls: CddlLanguageServer, params: CompletionParams) -> Optional[CompletionList]:
    """
    Autocomplete: operadores de controle após '.', prelúdio padrão nos demais casos.
    """
    try:
        doc = ls.workspace.get_text_document(params.text_document.uri)
        return compute_completions(doc.source, params.position)
    except Exception as e:
        logger.error(f"Erro no completion: {e}", exc_info=True)
        return None


@server.feature(COMPLETION_ITEM_RESOLVE)
def completion_resolve(ls: CddlLanguageServer, item: CompletionItem) -> CompletionItem:
    """Preenche detail (prelúdio) ou insert_text (operador de controle)."""
    try:
        return resolve_completion(item)
    except Exception as e:
        logger.error(f"Erro ao resolver item de completion: {e}", exc_info=True)
        return item


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: CddlLanguageServer, params: HoverParams):
    """Retorna documentação do tipo do prelúdio ou operador de controle sob o cursor."""
    try:
        doc = ls.workspace.get_text_document(params.text_document.uri)
        return compute_hover(doc.source, params.position)
    except Exception as e:
        logger.error(f"Erro no hover: {e}", exc_info=True)
        return None


@server.feature(TEXT_DOCUMENT_DEFINITION)
def definition(ls: CddlLanguageServer, params: DefinitionParams):
    """
    Go-to-definition: regra ou parâmetro genérico no mesmo documento.

    Depende do parse_cache; retorna None se o documento nunca foi analisado com sucesso.
    """
    uri = params.text_document.uri
    try:
        doc = ls.workspace.get_text_document(uri)
        return compute_definition(
            doc.source,
            params.position,
            uri,
            ls.parse_cache.get(uri),
            getattr(doc, "version", None),
        )
    except Exception as e:
        logger.error(f"Erro no go-to-definition: {e}", exc_info=True)
        return None


@server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(ls: CddlLanguageServer, params: DocumentSymbolParams) -> list:
    """Retorna document symbols (regras) para outline/breadcrumb do editor."""
    uri = params.text_document.uri
    try:
        doc = ls.workspace.get_text_document(uri)
        return compute_document_symbols(doc.source, ls.parse_cache.get(uri))
    except Exception as e:
        logger.error(f"Erro ao computar document symbols: {e}", exc_info=True)
        return []


def main() -> None:
    """
    Ponto de entrada principal do servidor.

    Inicia servidor LSP em modo STDIO para comunicação com o editor.
    """
    logger.info("Iniciando CDDL Language Server...")
    logger.info("Python executable: %s", sys.executable)
    logger.info("cddl-lsp package: %s", __version__)
    server.start_io()


if __name__ == "__main__":
    main()
