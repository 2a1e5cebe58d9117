"""LSP formatting command for SQL embedded in R strings."""

from .formatter import NOT_IN_SQL_MESSAGE, UNSUPPORTED_ESCAPES_MESSAGE, SQLFormatter, apply_indentation
from .formatting import FORMAT_SQL_COMMAND, SUCCESS_MESSAGE, execute_format_command, register_formatting

__all__ = [
    "FORMAT_SQL_COMMAND",
    "NOT_IN_SQL_MESSAGE",
    "SUCCESS_MESSAGE",
    "SQLFormatter",
    "UNSUPPORTED_ESCAPES_MESSAGE",
    "apply_indentation",
    "execute_format_command",
    "register_formatting",
]
