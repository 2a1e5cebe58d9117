from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


# R DBI functions whose string arguments are SQL. Namespace-qualified names
# come first so that a qualified call resolves to the qualified name.
DBI_FUNCTIONS: tuple[str, ...] = (
    "DBI::dbExecute",
    "DBI::dbGetQuery",
    "DBI::dbSendQuery",
    "DBI::dbSendStatement",
    "dbplyr::sql",
    "dbExecute",
    "dbGetQuery",
    "dbSendQuery",
    "dbSendStatement",
    "sql",
)

# Only the SQL-specific glue functions; plain glue() is general string
# interpolation and is not treated as SQL.
GLUE_FUNCTIONS: tuple[str, ...] = (
    "glue::glue_sql",
    "glue::glue_data_sql",
    "glue_sql",
    "glue_data_sql",
)


def _ensure_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


class ParsingLimitsModel(BaseModel):
    """Performance and safety caps for the scanners."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_document_size: int = Field(default=1_000_000, gt=0)
    max_function_matches: int = Field(default=100, gt=0)
    max_paren_search_distance: int = Field(default=1000, gt=0)
    max_function_call_length: int = Field(default=50_000, gt=0)
    context_line_lookback: int = Field(default=100, ge=0)
    named_argument_lookback: int = Field(default=50, gt=0)
    cache_ttl_ms: int = Field(default=5000, gt=0)


class DetectionConfigModel(BaseModel):
    """Which R calls carry SQL and how R literals are quoted."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sql_functions: tuple[str, ...] = DBI_FUNCTIONS
    interpolating_functions: tuple[str, ...] = GLUE_FUNCTIONS
    statement_parameters: tuple[str, ...] = ("statement",)
    quote_chars: str = "\"'`"
    comment_char: str = "#"
    limits: ParsingLimitsModel = Field(default_factory=ParsingLimitsModel)

    @field_validator(
        "sql_functions", "interpolating_functions", "statement_parameters", mode="before"
    )
    @classmethod
    def _ensure_str_tuple(cls, value: Any) -> tuple[str, ...]:
        return _ensure_tuple(value)

    @field_validator("comment_char")
    @classmethod
    def _single_comment_char(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("comment_char must be a single character")
        return value

    @model_validator(mode="after")
    def _check_quotes(self) -> DetectionConfigModel:
        if not self.quote_chars:
            raise ValueError("quote_chars cannot be empty")
        if self.comment_char in self.quote_chars:
            raise ValueError("comment_char cannot also be a quote character")
        return self

    @property
    def all_functions(self) -> tuple[str, ...]:
        """Every SQL-bearing function name, non-interpolating first."""
        return self.sql_functions + tuple(
            name for name in self.interpolating_functions if name not in self.sql_functions
        )

    def is_interpolating(self, function_name: str) -> bool:
        return function_name in self.interpolating_functions


class FormattingConfigModel(BaseModel):
    """Options handed to the SQL pretty-printer."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword_case: Literal["upper", "lower", "capitalize"] | None = "upper"
    reindent: bool = True
    indent_width: int = Field(default=2, gt=0)


class DiagnosticsConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = True
    validate_with_duckdb: bool = True


class ServerConfigModel(BaseModel):
    """Top-level configuration of the language server."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    detection: DetectionConfigModel = Field(default_factory=DetectionConfigModel)
    formatting: FormattingConfigModel = Field(default_factory=FormattingConfigModel)
    diagnostics: DiagnosticsConfigModel = Field(default_factory=DiagnosticsConfigModel)
    semantic_tokens: bool = True
    completion: bool = True
