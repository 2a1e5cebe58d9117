import signal
from pathlib import Path
from typing import Optional

import click

from rsql_lsp.cli.utils import configure_logging, get_env_flag, output_error
from rsql_lsp.config.loader import load_config
from rsql_lsp.lsp.server import RSqlLanguageServer


@click.command(name="lsp")
@click.option("--port", type=int, help="Port number for LSP server (defaults to 3000)")
@click.option("--host", default="localhost", help="Host to bind to when using TCP mode (defaults to localhost)")
@click.option("--tcp", is_flag=True, help="Use TCP instead of stdio for LSP communication")
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Path to a configuration file")
@click.option("--database", default=":memory:", help="DuckDB database used for completion and validation")
@click.option("--no-duckdb", is_flag=True, help="Run without DuckDB suggestions and validation")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def lsp(
    port: Optional[int],
    host: str,
    tcp: bool,
    config_path: Optional[Path],
    database: str,
    no_duckdb: bool,
    debug: bool,
):
    """Start the language server for SQL embedded in R code.

    The server highlights, completes, checks and formats SQL strings passed
    to DBI, dbplyr and glue functions in R files.

    By default, the server uses stdio for communication (suitable for IDE integration).
    Use --tcp flag for testing or when stdio communication is not suitable.

    \b
    Examples:
        rsql-lsp lsp                     # Start LSP server using stdio
        rsql-lsp lsp --tcp               # Start LSP server using TCP on localhost:3000
        rsql-lsp lsp --tcp --port 4000   # Start LSP server using TCP on localhost:4000
        rsql-lsp lsp --config my.yml     # Use an explicit configuration file
        rsql-lsp lsp --no-duckdb         # Heuristic diagnostics and static completion only
        rsql-lsp lsp --debug             # Start with detailed debug logging
    """
    if not no_duckdb:
        no_duckdb = get_env_flag("RSQL_LSP_NO_DUCKDB")

    configure_logging(debug)

    try:
        config = load_config(config_path)
        final_port = port or 3000

        def signal_handler(signum, frame):
            raise KeyboardInterrupt()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        server = RSqlLanguageServer(
            config=config,
            use_duckdb=not no_duckdb,
            database=database,
            port=final_port,
        )

        if tcp:
            click.echo(f"Starting rsql-lsp server on {host}:{final_port}", err=True)
            server.start(host=host, use_tcp=True)
        else:
            server.start(host=host, use_tcp=False)

    except KeyboardInterrupt:
        click.echo("\nLSP server stopped", err=True)
    except Exception as e:
        output_error(e, json_output=False, debug=debug)
