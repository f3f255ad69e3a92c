import click

from .cli_methods import methods
from .cli_request import request


@click.group()
@click.version_option(package_name="discovery-client")
def cli() -> None:
    """Inspect discovery documents and build or send API requests."""


cli.add_command(methods)
cli.add_command(request)

__all__ = ["cli"]
