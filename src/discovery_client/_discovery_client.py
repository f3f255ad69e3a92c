from logging import getLogger
from typing import Any, Dict, Optional, Union

import httpx
from dotenv import load_dotenv

from ._config import ClientOptions, resolve_options
from ._services import Api, BaseService
from ._utils._logs import setup_logging
from .models.discovery import ApiDescriptor

load_dotenv()

ApiSource = Union[ApiDescriptor, Dict[str, Any]]


class DiscoveryClient:
    """Entry point: turns discovery documents into callable API namespaces.

    Args:
        params: Default parameters merged under every call's parameters.
        auth: Default credentials, an API key string or an Authorizer.
        api_key: API key sent as ``key`` when a call has no auth of its own.
            Falls back to ``DISCOVERY_API_KEY``.
        root_url: Override for every API's root URL. Falls back to
            ``DISCOVERY_ROOT_URL``.
        headers: Extra headers sent with every request.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, for proxies or tests.
        debug: Enable debug logging.

    Examples:
        >>> client = DiscoveryClient(params={"prettyPrint": False})
        >>> drive = client.api(load_discovery("drive-v2.json"))
        >>> body = await drive.files.get(fileId="abc123")
    """

    def __init__(
        self,
        *,
        params: Optional[Dict[str, Any]] = None,
        auth: Any = None,
        api_key: Optional[str] = None,
        root_url: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport | httpx.AsyncBaseTransport] = None,
        debug: bool = False,
    ) -> None:
        self._options = resolve_options(
            params=params,
            auth=auth,
            api_key=api_key,
            root_url=root_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
            debug=debug,
        )

        setup_logging(self._options.debug)
        log = getLogger("discovery_client")
        log.debug("CONFIG:")
        log.debug(f"{self._options.model_dump(exclude={'auth', 'api_key', 'transport'})}\n")

        self._service = BaseService(self._options)

    @property
    def options(self) -> ClientOptions:
        return self._options

    def api(self, source: ApiSource, *, params: Optional[Dict[str, Any]] = None) -> Api:
        """Build the callable namespace of an API.

        Args:
            source: A parsed ApiDescriptor or a raw discovery document.
            params: Default parameters for this API only, layered over the
                client defaults.
        """
        descriptor = (
            source
            if isinstance(source, ApiDescriptor)
            else ApiDescriptor.from_discovery(source)
        )
        if self._options.root_url:
            descriptor = descriptor.with_root_url(self._options.root_url)
        return Api(descriptor, self._options.with_params(params), self._service)

    def discover(self, url: str, *, params: Optional[Dict[str, Any]] = None) -> Api:
        """Fetch a discovery document over HTTP and build its namespace."""
        return self.api(self._service.get_json(url), params=params)

    async def discover_async(
        self, url: str, *, params: Optional[Dict[str, Any]] = None
    ) -> Api:
        return self.api(await self._service.get_json_async(url), params=params)

    def close(self) -> None:
        self._service.close()

    async def aclose(self) -> None:
        await self._service.aclose()

    def __enter__(self) -> "DiscoveryClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> "DiscoveryClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
