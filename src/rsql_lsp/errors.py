"""Exceptions raised by rsql-lsp.

Detection never raises for ordinary not-found conditions; these exceptions are
reserved for configuration problems and for operations that would otherwise
write corrupted text back into the user's buffer.
"""


class RSqlError(Exception):
    """Base class for rsql-lsp errors."""
    pass


class ConfigError(RSqlError):
    """Raised when the configuration file cannot be read or validated.

    Attributes:
        path: The offending file, if any
    """
    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class InterpolationRoundTripError(RSqlError):
    """Raised when restoring glue interpolations would not reproduce the original text."""
    pass


class FormattingError(RSqlError):
    """Raised when a SQL string cannot be formatted."""
    pass


class DuckDBConnectionError(RSqlError):
    """Raised when DuckDB connection operations fail."""
    pass
