"""Format-SQL command for the LSP server."""

import logging
from typing import Any, Optional, Sequence, Tuple

from lsprotocol import types
from pygls.server import LanguageServer

from rsql_lsp.errors import RSqlError
from rsql_lsp.lsp.utils.r_document import RDocument

from .formatter import SQLFormatter

logger = logging.getLogger(__name__)

FORMAT_SQL_COMMAND = "rsql.formatSQL"
SUCCESS_MESSAGE = "SQL formatted successfully"


def _parse_arguments(args: Sequence[Any]) -> Tuple[str, types.Position]:
    """Accept ``[uri, position]`` with the position as a dict or Position."""
    if not args or len(args) < 2:
        raise ValueError(f"{FORMAT_SQL_COMMAND} expects [uri, position]")

    uri, position = args[0], args[1]
    if isinstance(position, dict):
        position = types.Position(line=int(position["line"]), character=int(position["character"]))
    elif not isinstance(position, types.Position):
        position = types.Position(line=int(position.line), character=int(position.character))
    return str(uri), position


def execute_format_command(
    ls: LanguageServer, formatter: SQLFormatter, args: Sequence[Any]
) -> Optional[types.WorkspaceEdit]:
    """
    Format the SQL string at ``[uri, position]`` and apply the edit.

    Problems are reported with window/showMessage; the buffer is only edited
    when every check passed.

    Returns:
        The applied workspace edit, or None when nothing was changed
    """
    try:
        uri, position = _parse_arguments(args)
        r_document = RDocument(ls.workspace.get_text_document(uri))
        edit = formatter.format_at(r_document, position)
    except RSqlError as e:
        logger.warning(f"Formatting aborted: {e}")
        ls.show_message(str(e), types.MessageType.Warning)
        return None
    except Exception as e:
        logger.error(f"Error formatting SQL: {e}")
        ls.show_message(f"SQL formatting encountered an error: {e}", types.MessageType.Error)
        return None

    if edit is None:
        return None

    workspace_edit = types.WorkspaceEdit(changes={uri: [edit]})
    ls.apply_edit(workspace_edit, label="Format SQL")
    ls.show_message(SUCCESS_MESSAGE, types.MessageType.Info)
    return workspace_edit


def register_formatting(server: LanguageServer, formatter: SQLFormatter) -> SQLFormatter:
    """
    Register the format-SQL command with the LSP server.

    Args:
        server: The language server instance
        formatter: Formatter holding the formatting and detection configuration

    Returns:
        The formatter instance
    """
    try:

        @server.command(FORMAT_SQL_COMMAND)
        def format_sql(ls: LanguageServer, args):
            """Format the SQL string at the given position."""
            return execute_format_command(ls, formatter, args)

        logger.info("Formatting command registered successfully")
        return formatter

    except Exception as e:
        logger.error(f"Error registering formatting command: {e}")
        raise
