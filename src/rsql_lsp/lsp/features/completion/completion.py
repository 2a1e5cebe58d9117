from lsprotocol import types
from pygls.server import LanguageServer
from typing import List, Optional
import logging

from rsql_lsp.config.models import DetectionConfigModel
from rsql_lsp.core.context import detect_sql_context, sql_cursor_offset
from rsql_lsp.core.escapes import unescape_r_string
from rsql_lsp.core.interpolation import is_inside_interpolation, strip_interpolations
from rsql_lsp.core.keywords import SQL_FUNCTION_TOKENS, SQL_KEYWORDS
from rsql_lsp.core.positions import compare_positions
from rsql_lsp.lsp.utils import DuckDBConnector, RDocument, RegionService

logger = logging.getLogger(__name__)


def _static_items() -> List[types.CompletionItem]:
    items = [
        types.CompletionItem(
            label=keyword,
            kind=types.CompletionItemKind.Keyword,
            detail="SQL keyword",
            sort_text=f"1_{keyword}",
        )
        for keyword in SQL_KEYWORDS
    ]
    items.extend(
        types.CompletionItem(
            label=function,
            kind=types.CompletionItemKind.Function,
            detail="DuckDB function",
            insert_text=f"{function}($0)",
            insert_text_format=types.InsertTextFormat.Snippet,
            sort_text=f"2_{function}",
        )
        for function in sorted(SQL_FUNCTION_TOKENS)
    )
    return items


def provide_completions(
    r_document: RDocument,
    position: types.Position,
    config: DetectionConfigModel,
    duck_db_connector: Optional[DuckDBConnector] = None,
) -> Optional[types.CompletionList]:
    """
    Completions for a client position, or None outside SQL strings.

    Inside a glue interpolation the cursor is R code, so nothing is offered.
    DuckDB suggestions (computed from the SQL before the cursor) rank first
    and shadow static items with the same label.
    """
    document = r_document.document
    core_position = r_document.to_core_position(position)
    context = detect_sql_context(document, core_position, config)
    if context is None:
        logger.debug("Cursor is not in a SQL string - returning None")
        return None

    # Just after the closing quote still counts as in the string; the quote is not SQL
    end = core_position
    if compare_positions(end, context.range.end) > 0:
        end = context.range.end
    cursor = sql_cursor_offset(document, end, context)
    raw_prefix = document.get_text(types.Range(start=context.range.start, end=end))

    if context.is_interpolating and is_inside_interpolation(raw_prefix, cursor):
        logger.debug("Cursor is inside a glue interpolation - returning None")
        return None

    items: List[types.CompletionItem] = []
    if duck_db_connector is not None:
        code = unescape_r_string(raw_prefix)
        if context.is_interpolating:
            code = strip_interpolations(code)
        items.extend(duck_db_connector.get_completions(code))

    seen = {item.label.upper() for item in items}
    items.extend(item for item in _static_items() if item.label.upper() not in seen)

    logger.debug(f"Returning {len(items)} completion items for {context.function_name}")
    return types.CompletionList(is_incomplete=False, items=items)


def register_completion(
    server: LanguageServer,
    region_service: RegionService,
    duck_db_connector: Optional[DuckDBConnector] = None,
):
    """
    Register completion functionality with the LSP server.

    Args:
        server: The language server instance
        region_service: Shared region lookups; its detection configuration is
            read on every request
        duck_db_connector: Optional DuckDB connector for parser-driven suggestions
    """

    completion_options = types.CompletionOptions(
        trigger_characters=['.', ' '],
        resolve_provider=False,
    )

    @server.feature(types.TEXT_DOCUMENT_COMPLETION, completion_options)
    def completions(ls: LanguageServer, params: types.CompletionParams) -> Optional[types.CompletionList]:
        """
        Provide completions for the given text document position.

        Args:
            ls: Language server instance
            params: Completion parameters

        Returns:
            CompletionList, or None if not applicable
        """
        logger.debug(f"Completion request received for {params.text_document.uri} at position {params.position}")

        try:
            r_document = RDocument(ls.workspace.get_text_document(params.text_document.uri))
            if not r_document.should_provide_lsp():
                logger.debug("Not an R document - returning None")
                return None

            return provide_completions(
                r_document, params.position, region_service.config, duck_db_connector
            )

        except Exception as e:
            logger.error(f"Error in completion handler: {e}")
            return None
