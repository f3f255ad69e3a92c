import json
from importlib.metadata import PackageNotFoundError, version
from logging import getLogger
from typing import Any, Dict, Optional

from httpx import (
    AsyncBaseTransport,
    AsyncClient,
    BaseTransport,
    Client,
    Headers,
    Response,
)

from .._config import ClientOptions
from .._utils._errors import handle_errors
from .._utils._media import MultipartStream, aiter_chunks, is_stream, iter_chunks
from .._utils._request_spec import RequestDescriptor
from .._utils.constants import (
    CONTENT_TYPE_JSON,
    HEADER_ACCEPT,
    HEADER_USER_AGENT,
    QUERY_ALT,
)


def user_agent_value() -> str:
    try:
        package_version = version("discovery-client")
    except PackageNotFoundError:
        package_version = "0.0.0"
    return f"discovery-client/{package_version}"


def decode_response(response: Response, request: RequestDescriptor) -> Any:
    """Decode a successful response body.

    ``alt=media`` downloads stay raw bytes. Everything else is parsed as JSON
    when the content type says so or when the text happens to be JSON, and is
    returned as text otherwise.
    """
    query = request.uri.query or ""
    if f"{QUERY_ALT}=media" in query.split("&"):
        return response.content
    if not response.content:
        return None

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.json()
    text = response.text
    try:
        return json.loads(text)
    except ValueError:
        return text


class BaseService:
    """Transport for constructed requests, over httpx sync and async clients."""

    def __init__(self, options: ClientOptions) -> None:
        self._logger = getLogger("discovery_client")
        self._options = options

        client_kwargs: Dict[str, Any] = {
            "timeout": options.timeout,
            "headers": Headers(self.default_headers),
            "follow_redirects": True,
        }
        transport = options.transport

        self._client = Client(
            **client_kwargs,
            transport=transport if isinstance(transport, BaseTransport) else None,
        )
        self._client_async = AsyncClient(
            **client_kwargs,
            transport=transport if isinstance(transport, AsyncBaseTransport) else None,
        )

        self._logger.debug(f"HEADERS: {self.default_headers}")

    @property
    def default_headers(self) -> Dict[str, str]:
        return {
            HEADER_ACCEPT: CONTENT_TYPE_JSON,
            HEADER_USER_AGENT: user_agent_value(),
            **self._options.headers,
        }

    def send(self, request: RequestDescriptor) -> Any:
        self._logger.debug(f"Sending: {request.method} {request.uri.href}")
        with handle_errors():
            response = self._client.request(
                request.method,
                request.uri.href,
                headers=request.headers.to_httpx(),
                content=_sync_content(request.body),
            )
            response.raise_for_status()
        return decode_response(response, request)

    async def send_async(self, request: RequestDescriptor) -> Any:
        self._logger.debug(f"Sending: {request.method} {request.uri.href}")
        with handle_errors():
            response = await self._client_async.request(
                request.method,
                request.uri.href,
                headers=request.headers.to_httpx(),
                content=_async_content(request.body),
            )
            response.raise_for_status()
        return decode_response(response, request)

    def get_json(self, url: str) -> Any:
        with handle_errors():
            response = self._client.get(url)
            response.raise_for_status()
        return response.json()

    async def get_json_async(self, url: str) -> Any:
        with handle_errors():
            response = await self._client_async.get(url)
            response.raise_for_status()
        return response.json()

    def close(self) -> None:
        self._client.close()

    async def aclose(self) -> None:
        await self._client_async.aclose()


def _sync_content(body: Any) -> Optional[Any]:
    if isinstance(body, MultipartStream):
        return iter(body)
    if is_stream(body):
        return iter_chunks(body)
    return body


def _async_content(body: Any) -> Optional[Any]:
    if isinstance(body, MultipartStream):
        return body.__aiter__()
    if is_stream(body):
        return aiter_chunks(body)
    return body
