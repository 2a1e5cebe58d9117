from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from rsql_lsp.cli.utils import configure_logging, output_error, output_result
from rsql_lsp.config.loader import load_config
from rsql_lsp.core.context import clean_sql_string
from rsql_lsp.core.document import Document
from rsql_lsp.core.keywords import SQL_KEYWORD_TOKENS
from rsql_lsp.core.models import CachedRegion
from rsql_lsp.core.regions import find_all_regions
from rsql_lsp.core.tokenizer import tokenize


def describe_region(region: CachedRegion, with_tokens: bool = False) -> Dict[str, Any]:
    """Plain-data view of a region for printing."""
    start, end = region.range.start, region.range.end
    info: Dict[str, Any] = {
        "function": region.function_name,
        "start": {"line": start.line, "character": start.character},
        "end": {"line": end.line, "character": end.character},
        "multiline": region.is_multiline,
        "interpolating": region.is_interpolating,
        "sql": clean_sql_string(region.raw_text),
    }
    if with_tokens:
        # Offsets index into the printed sql
        info["tokens"] = [
            {"type": token.type.value, "text": token.text, "offset": token.offset}
            for token in tokenize(info["sql"], SQL_KEYWORD_TOKENS)
        ]
    return info


def format_region(info: Dict[str, Any]) -> str:
    start, end = info["start"], info["end"]
    flags = " glue" if info["interpolating"] else ""
    header = f"{start['line'] + 1}:{start['character'] + 1}-{end['line'] + 1}:{end['character'] + 1} {info['function']}{flags}"
    lines = [header] + [f"    {line}" for line in info["sql"].split("\n")]
    for token in info.get("tokens", []):
        lines.append(f"    [{token['type']}] {token['text']!r}")
    return "\n".join(lines)


@click.command(name="regions")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Path to a configuration file")
@click.option("--tokens", is_flag=True, help="Also print the SQL tokens of every region")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def regions(file: Path, config_path: Optional[Path], tokens: bool, json_output: bool, debug: bool):
    """List the SQL strings detected in an R file.

    \b
    Examples:
        rsql-lsp regions analysis.R
        rsql-lsp regions analysis.R --tokens
        rsql-lsp regions analysis.R --json-output
    """
    configure_logging(debug)

    try:
        config = load_config(config_path)
        document = Document(uri=file.resolve().as_uri(), text=file.read_text(encoding="utf-8"))
        found = find_all_regions(document, config.detection) or []

        described: List[Dict[str, Any]] = [describe_region(region, tokens) for region in found]
        if json_output:
            output_result(described, json_output=True)
        elif not described:
            click.echo("No SQL strings found")
        else:
            output_result([format_region(info) for info in described])

    except Exception as e:
        output_error(e, json_output=json_output, debug=debug)
