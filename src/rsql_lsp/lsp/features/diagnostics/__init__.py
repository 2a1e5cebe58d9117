from .diagnostics import DiagnosticsService, register_diagnostics
from .sql_checks import check_sql

__all__ = ["DiagnosticsService", "check_sql", "register_diagnostics"]
