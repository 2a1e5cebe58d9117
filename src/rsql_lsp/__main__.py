import click

from rsql_lsp.cli.lsp import lsp
from rsql_lsp.cli.regions import regions


@click.group(invoke_without_command=True)
@click.version_option(package_name="rsql-lsp")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """SQL language support for R strings"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(lsp)
cli.add_command(regions)


if __name__ == "__main__":
    cli()
