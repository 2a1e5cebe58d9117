"""Tests for loading and merging the server configuration."""

from pathlib import Path

import pytest

from rsql_lsp.config.loader import (
    CONFIG_ENV_VAR,
    find_config_file,
    load_config,
    merge_overrides,
    parse_config,
)
from rsql_lsp.config.models import DBI_FUNCTIONS, DetectionConfigModel, ServerConfigModel
from rsql_lsp.errors import ConfigError


@pytest.fixture(autouse=True)
def isolated_config_search(tmp_path, monkeypatch):
    """Keep the user's own config files out of the search path."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path / "home"))


def test_defaults_without_config_file():
    config = load_config()

    assert config == ServerConfigModel()
    assert config.detection.sql_functions == DBI_FUNCTIONS
    assert config.detection.statement_parameters == ("statement",)
    assert config.formatting.keyword_case == "upper"


def test_load_explicit_file(tmp_path):
    config_file = tmp_path / "custom.yml"
    config_file.write_text(
        """
detection:
  sql_functions: [dbGetQuery, run_query]
  statement_parameters: [statement, sql]
  limits:
    context_line_lookback: 10
formatting:
  keyword_case: lower
semantic_tokens: false
"""
    )

    config = load_config(config_file)

    assert config.detection.sql_functions == ("dbGetQuery", "run_query")
    assert config.detection.statement_parameters == ("statement", "sql")
    assert config.detection.limits.context_line_lookback == 10
    assert config.detection.limits.max_document_size == 1_000_000
    assert config.formatting.keyword_case == "lower"
    assert config.semantic_tokens is False


def test_working_directory_file_is_found(tmp_path):
    (tmp_path / "rsql-lsp.yml").write_text("completion: false\n")

    assert find_config_file() == tmp_path / "rsql-lsp.yml"
    assert load_config().completion is False


def test_environment_variable(tmp_path, monkeypatch):
    config_file = tmp_path / "from-env.yml"
    config_file.write_text("diagnostics:\n  validate_with_duckdb: false\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

    assert load_config().diagnostics.validate_with_duckdb is False


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError) as exc_info:
        load_config(tmp_path / "nope.yml")

    assert exc_info.value.path == str(tmp_path / "nope.yml")


def test_empty_file_gives_defaults(tmp_path):
    config_file = tmp_path / "empty.yml"
    config_file.write_text("")

    assert load_config(config_file) == ServerConfigModel()


@pytest.mark.parametrize(
    "content",
    [
        "detection: [1, 2\n",
        "- just\n- a list\n",
        "unknown_section: true\n",
        "detection:\n  comment_char: '##'\n",
        "detection:\n  quote_chars: ''\n",
        "detection:\n  limits:\n    max_document_size: 0\n",
        "formatting:\n  keyword_case: shouty\n",
    ],
)
def test_invalid_config(tmp_path, content):
    config_file = tmp_path / "bad.yml"
    config_file.write_text(content)

    with pytest.raises(ConfigError):
        load_config(config_file)


def test_single_function_name_becomes_tuple():
    config = parse_config({"detection": {"sql_functions": "dbGetQuery"}})
    assert config.detection.sql_functions == ("dbGetQuery",)


def test_all_functions_lists_each_name_once():
    detection = DetectionConfigModel(
        sql_functions=("dbGetQuery", "glue_sql"),
        interpolating_functions=("glue_sql",),
    )

    assert detection.all_functions == ("dbGetQuery", "glue_sql")
    assert detection.is_interpolating("glue_sql")
    assert not detection.is_interpolating("dbGetQuery")


class TestMergeOverrides:
    def test_nested_keys_merge(self):
        base = parse_config({"detection": {"statement_parameters": ["statement", "sql"]}})

        merged = merge_overrides(base, {"detection": {"limits": {"cache_ttl_ms": 100}}})

        assert merged.detection.limits.cache_ttl_ms == 100
        assert merged.detection.statement_parameters == ("statement", "sql")

    def test_lists_replace(self):
        merged = merge_overrides(ServerConfigModel(), {"detection": {"sql_functions": ["q"]}})
        assert merged.detection.sql_functions == ("q",)

    def test_no_overrides(self):
        base = ServerConfigModel()
        assert merge_overrides(base, None) is base
        assert merge_overrides(base, {}) is base

    def test_invalid_override(self):
        with pytest.raises(ConfigError, match="initializationOptions"):
            merge_overrides(ServerConfigModel(), {"completion": "maybe"})
