import json
from typing import Any, Dict, Optional, Tuple

import click

from .._discovery_client import DiscoveryClient
from ..models.discovery import load_discovery
from ..models.errors import DiscoveryClientError
from ._utils._console import ConsoleLogger

console = ConsoleLogger()


def parse_params(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    """Turn ``key=value`` pairs into call parameters.

    Repeating a key collects its values into a list; values that parse as
    JSON (numbers, booleans, lists) are decoded.
    """
    params: Dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected key=value, got '{pair}'")
        key, raw = pair.split("=", 1)
        try:
            value: Any = json.loads(raw)
        except json.JSONDecodeError:
            value = raw
        if key in params:
            existing = params[key]
            params[key] = (existing if isinstance(existing, list) else [existing]) + [value]
        else:
            params[key] = value
    return params


@click.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.argument("method_id")
@click.option("--param", "-p", "param_pairs", multiple=True, help="Call parameter as key=value")
@click.option("--resource", "resource_json", help="Request resource as a JSON object")
@click.option("--media", "media_file", type=click.Path(exists=True, dir_okay=False), help="File to upload as media")
@click.option("--media-type", help="MIME type of the uploaded media")
@click.option("--api-key", envvar="DISCOVERY_API_KEY", help="API key sent as the key query parameter")
@click.option("--send", is_flag=True, help="Send the request and print the response body")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def request(
    document: str,
    method_id: str,
    param_pairs: Tuple[str, ...],
    resource_json: Optional[str],
    media_file: Optional[str],
    media_type: Optional[str],
    api_key: Optional[str],
    send: bool,
    debug: bool,
) -> None:
    """Build the request for METHOD_ID of a discovery DOCUMENT."""
    params = parse_params(param_pairs)
    if resource_json:
        try:
            params["resource"] = json.loads(resource_json)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"--resource is not valid JSON: {e}") from e

    with DiscoveryClient(api_key=api_key, debug=debug) as client:
        api = client.api(load_discovery(document))
        try:
            method = api.method(method_id)
        except KeyError:
            console.error(f"Unknown method '{method_id}'")
            return

        if media_file:
            if not media_type:
                console.warning(
                    "No --media-type given, the upload content type will be inferred"
                )
            with open(media_file, "rb") as f:
                params["media"] = {"mimeType": media_type, "body": f.read()}

        call = method(params)
        if call.req is None:
            console.error(str(call.exception()))
            return

        console.info(json.dumps(call.req.describe(), indent=2))
        if not send:
            return

        try:
            body = call.result()
        except DiscoveryClientError as e:
            console.error(str(e))
            return
        console.success(f"{call.req.method} {call.req.uri.href} succeeded")
        console.info(body if isinstance(body, str) else json.dumps(body, indent=2))
