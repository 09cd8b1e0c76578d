import click

from .._utils._user_agent import package_version
from ._utils._common import load_environment, setup_logging
from .cli_download import download
from .cli_send import send


@click.group(invoke_without_command=True)
@click.version_option(package_version(), prog_name="restrequest")
@click.option("--verbose", "-v", is_flag=True, help="Log requests and responses")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    r"""Send HTTP requests from the command line.

    Settings are read from RESTREQUEST_* environment variables and from a
    .env file in the current directory.

    \b
    Examples:
        restrequest send GET https://httpbin.org/get
        restrequest download https://httpbin.org/image/png image.png
    """
    load_environment()
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(send)
cli.add_command(download)
