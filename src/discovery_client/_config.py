from os import environ as env
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ._utils.constants import ENV_API_KEY, ENV_ROOT_URL

DEFAULT_TIMEOUT = 30.0


class ClientOptions(BaseModel):
    """Settings shared by every call made through one client."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    params: Dict[str, Any] = Field(default_factory=dict)
    auth: Any = None
    api_key: Optional[str] = None
    root_url: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    transport: Optional[httpx.BaseTransport | httpx.AsyncBaseTransport] = None
    debug: bool = False

    def with_params(self, params: Optional[Dict[str, Any]]) -> "ClientOptions":
        """Layer per-API default params over the client defaults."""
        if not params:
            return self
        return self.model_copy(update={"params": {**self.params, **params}})


def resolve_options(
    *,
    params: Optional[Dict[str, Any]] = None,
    auth: Any = None,
    api_key: Optional[str] = None,
    root_url: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport | httpx.AsyncBaseTransport] = None,
    debug: bool = False,
) -> ClientOptions:
    """Build ClientOptions, falling back to the environment for key and root URL."""
    return ClientOptions(
        params=dict(params or {}),
        auth=auth,
        api_key=api_key or env.get(ENV_API_KEY),
        root_url=root_url or env.get(ENV_ROOT_URL),
        headers=dict(headers or {}),
        timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
        transport=transport,
        debug=debug,
    )
