import json
from contextlib import contextmanager
from typing import Any, Generator, Optional

import httpx

from ..models.errors import ApplicationError, TransportError


def _error_message(error_body: Any) -> Optional[str]:
    if not isinstance(error_body, dict):
        return None
    nested = error_body.get("error")
    if isinstance(nested, dict) and nested.get("message"):
        return nested["message"]
    if not isinstance(nested, str):
        nested = None
    message = error_body.get("message") or nested or error_body.get("detail")
    return str(message) if message else None


@contextmanager
def handle_errors() -> Generator[None, None, None]:
    """Context manager for handling HTTP errors around a request exchange.

    Converts httpx failures into discovery_client errors; errors raised by
    the library itself (upload encoding, cancellation) pass through unchanged.

    Yields:
        None: The context manager yields control to the wrapped code.

    Raises:
        ApplicationError: For non-2xx responses, with status code and body.
        TransportError: For connection, timeout and protocol failures.
    """
    try:
        yield
    except httpx.HTTPStatusError as e:
        try:
            error_body = e.response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            error_body = e.response.text

        message = _error_message(error_body)
        raise ApplicationError(
            message or str(e), e.response.status_code, error_body
        ) from e
    except httpx.HTTPError as e:
        raise TransportError(f"{type(e).__name__}: {e}", cause=e) from e
