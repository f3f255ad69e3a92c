import click

from ..models.discovery import load_discovery
from ._utils._console import ConsoleLogger

console = ConsoleLogger()


@click.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
def methods(document: str) -> None:
    """List the methods declared by a discovery DOCUMENT."""
    try:
        api = load_discovery(document)
    except ValueError as e:
        console.error(f"Invalid discovery document {document}: {e}")
        return

    rows = [
        (
            method.id,
            method.http_method,
            method.path,
            "yes" if method.supports_media_upload else "",
        )
        for method in api.iter_methods()
    ]
    console.table(
        f"{api.name} {api.version}".strip() or document,
        ("Method", "Verb", "Path", "Upload"),
        rows,
    )
