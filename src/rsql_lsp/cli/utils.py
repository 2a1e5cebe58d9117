import json
import logging
import os
import traceback
from typing import Any, List

import click

DEBUG_ENV_VAR = "RSQL_LSP_DEBUG"
LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """True when ``env_var`` is "1", "true" or "yes" (any case); ``default`` when unset."""
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


def configure_logging(debug: bool = False) -> None:
    """Send all log records to a single stderr handler.

    stdout is left alone: in stdio mode it carries the LSP stream.
    """
    level = logging.DEBUG if debug or get_env_flag(DEBUG_ENV_VAR) else logging.WARNING

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)


def output_result(result: Any, json_output: bool = False) -> None:
    """Print a result as a JSON envelope or as one line per row."""
    if json_output:
        click.echo(json.dumps({"status": "ok", "result": result}, indent=2, default=str))
        return
    rows: List[Any] = result if isinstance(result, list) else [result]
    for row in rows:
        click.echo(row)


def output_error(error: Exception, json_output: bool = False, debug: bool = False) -> None:
    """Report ``error`` and abort the command.

    With ``debug`` the exception type and traceback are included.
    """
    if json_output:
        payload = {"status": "error", "error": str(error)}
        if debug:
            payload["type"] = error.__class__.__name__
            payload["traceback"] = traceback.format_exc()
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(f"Error: {error}", err=True)
        if debug:
            click.echo(traceback.format_exc(), err=True)

    raise click.Abort()
