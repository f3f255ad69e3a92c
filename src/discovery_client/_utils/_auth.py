from typing import Any, Dict, MutableMapping, Optional, Protocol, runtime_checkable

from ..models.auth import TokenData
from ..models.errors import DiscoveryClientError
from .constants import HEADER_AUTHORIZATION, QUERY_API_KEY


@runtime_checkable
class Authorizer(Protocol):
    """Credential object that decorates outgoing requests.

    Token storage and refresh are the implementation's business; the engine
    only asks it to annotate the headers of each request it builds.
    """

    def apply(self, headers: MutableMapping[str, str]) -> None: ...


class BearerTokenAuthorizer:
    """Sends an OAuth2 access token as an ``Authorization: Bearer`` header."""

    def __init__(self, token: TokenData | str):
        if isinstance(token, str):
            token = TokenData(access_token=token)
        self.token = token

    def apply(self, headers: MutableMapping[str, str]) -> None:
        token_type = self.token.token_type or "Bearer"
        headers[HEADER_AUTHORIZATION] = f"{token_type} {self.token.access_token}"


def apply_auth(
    auth: Any,
    headers: MutableMapping[str, str],
    query_params: Dict[str, Any],
    api_key: Optional[str] = None,
) -> None:
    """Decorate a request with credentials.

    An Authorizer annotates the headers and suppresses API key injection; a
    string is an API key, sent as the ``key`` query parameter unless the call
    already carries one. ``api_key`` is the client default, used only when the
    call has no auth of its own.
    """
    if isinstance(auth, Authorizer):
        auth.apply(headers)
        return
    if auth is not None and not isinstance(auth, str):
        raise DiscoveryClientError(
            f"auth must be an API key string or an Authorizer, got {type(auth).__name__}"
        )
    key = auth or api_key
    if key and QUERY_API_KEY not in query_params:
        query_params[QUERY_API_KEY] = key
