from logging import getLogger
from typing import Any, Dict, Mapping, Optional

from httpx import Headers

from ._auth import apply_auth
from ._request_spec import FrozenHeaders, RequestDescriptor, RequestUri
from ._url import build_query

logger = getLogger("discovery_client")


def assemble_request(
    method: str,
    origin: str,
    pathname: str,
    query_params: Mapping[str, Any],
    headers: Optional[Mapping[str, str]] = None,
    body: Any = None,
    auth: Any = None,
    api_key: Optional[str] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> RequestDescriptor:
    """Apply credentials and freeze the request into a RequestDescriptor.

    Auth runs before the query is serialized so that an injected API key
    lands after every other query parameter.
    """
    outgoing = Headers(headers or {})
    query: Dict[str, Any] = dict(query_params)
    apply_auth(auth, outgoing, query, api_key=api_key)

    request = RequestDescriptor(
        method=method.upper(),
        uri=RequestUri(origin=origin, pathname=pathname, query=build_query(query)),
        headers=FrozenHeaders(outgoing),
        body=body,
        params=params,
    )
    logger.debug(f"Request: {request.method} {request.uri.href}")
    return request
