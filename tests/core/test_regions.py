"""Tests for document-wide SQL region discovery."""

import threading

from rsql_lsp.core.regions import find_all_regions


def test_finds_each_call_in_document_order(make_document, detection_config):
    document = make_document(
        'x <- sql("SELECT 1")\n'
        'res <- dbGetQuery(con, "SELECT * FROM t")\n'
        'dbExecute(con, "DELETE FROM t")\n'
    )

    regions = find_all_regions(document, detection_config)

    assert [r.function_name for r in regions] == ["sql", "dbGetQuery", "dbExecute"]
    assert [r.raw_text for r in regions] == ["SELECT 1", "SELECT * FROM t", "DELETE FROM t"]
    assert [r.range.start.line for r in regions] == [0, 1, 2]
    assert regions[1].range.start.character == len('res <- dbGetQuery(con, "')
    assert regions[1].range.end.character == len('res <- dbGetQuery(con, "SELECT * FROM t')


def test_multiline_region(make_document, detection_config):
    document = make_document('dbGetQuery(con, "\n  SELECT *\n  FROM t\n")')

    regions = find_all_regions(document, detection_config)

    assert len(regions) == 1
    assert regions[0].is_multiline is True
    assert regions[0].range.start.line == 0
    assert regions[0].range.end.line == 3


def test_glue_region_is_interpolating(make_document, detection_config):
    document = make_document('glue_sql("SELECT * FROM {tbl}", .con = con)')

    regions = find_all_regions(document, detection_config)

    assert len(regions) == 1, "The .con string is not SQL"
    assert regions[0].is_interpolating is True
    assert regions[0].raw_text == "SELECT * FROM {tbl}"


def test_nested_call_attributed_to_innermost(make_document, detection_config):
    document = make_document('dbGetQuery(con, sql("SELECT 1"))')

    regions = find_all_regions(document, detection_config)

    assert len(regions) == 1, "A literal is reported once"
    assert regions[0].function_name == "sql"
    assert regions[0].is_direct_argument is True


def test_literals_inside_inner_brackets_are_not_direct(make_document, detection_config):
    document = make_document(
        'dbGetQuery(con, "SELECT * FROM t WHERE x = ? -- (", params = list("abc"))\n'
        'dbGetQuery(con, paste0("SELECT * FROM ", tbl))\n'
    )

    regions = find_all_regions(document, detection_config)

    assert [(r.raw_text, r.is_direct_argument) for r in regions] == [
        ("SELECT * FROM t WHERE x = ? -- (", True),
        ("abc", False),
        ("SELECT * FROM ", False),
    ], "Brackets inside string literals do not count"


def test_qualified_call_keeps_qualified_name(make_document, detection_config):
    document = make_document('DBI::dbGetQuery(con, "SELECT 1")')

    regions = find_all_regions(document, detection_config)

    assert [r.function_name for r in regions] == ["DBI::dbGetQuery"]


def test_named_argument_filter(make_document, detection_config):
    document = make_document(
        'dbGetQuery(con, query = "SELECT 1")\n'
        'dbGetQuery(con, statement = "SELECT 2")\n'
    )

    regions = find_all_regions(document, detection_config)

    assert [r.raw_text for r in regions] == ["SELECT 2"]


def test_calls_in_comments_and_strings_are_ignored(make_document, detection_config):
    document = make_document(
        '# dbGetQuery(con, "SELECT 1")\n'
        "print(\"dbGetQuery(con, 'SELECT 2')\")\n"
    )

    assert find_all_regions(document, detection_config) == []


def test_unclosed_literal_is_ignored(make_document, detection_config):
    document = make_document('dbGetQuery(con, "SELECT 1')

    assert find_all_regions(document, detection_config) == []


def test_oversize_document_yields_nothing(make_document, small_limits_config):
    document = make_document('dbGetQuery(con, "SELECT 1")\n' + "#" * 300)

    assert find_all_regions(document, small_limits_config) == []


def test_match_cap_returns_partial_result(make_document, small_limits_config):
    document = make_document("\n".join(f'dbGetQuery(con, "SELECT {i}")' for i in range(4)))

    regions = find_all_regions(document, small_limits_config)

    assert [r.raw_text for r in regions] == ["SELECT 0", "SELECT 1"]


def test_cancellation_returns_none(make_document, detection_config):
    document = make_document('dbGetQuery(con, "SELECT 1")')
    cancel = threading.Event()
    cancel.set()

    assert find_all_regions(document, detection_config, cancel) is None


def test_document_without_calls(make_document, detection_config):
    assert find_all_regions(make_document("x <- 1\ny <- x + 1\n"), detection_config) == []
