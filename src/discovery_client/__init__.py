from ._config import ClientOptions
from ._discovery_client import DiscoveryClient
from ._services import Api, ApiMethod, Invocation, Resource
from ._utils._auth import Authorizer, BearerTokenAuthorizer
from ._utils._media import Media, MultipartStream
from ._utils._request_spec import FrozenHeaders, RequestDescriptor, RequestUri
from .models import (
    ApiDescriptor,
    ApplicationError,
    DiscoveryClientError,
    MediaUpload,
    MethodDescriptor,
    MissingRequiredParameterError,
    ParameterSpec,
    PathTemplateError,
    RequestCancelledError,
    TokenData,
    TransportError,
    UploadEncodingError,
    load_discovery,
)

__all__ = [
    "Api",
    "ApiDescriptor",
    "ApiMethod",
    "ApplicationError",
    "Authorizer",
    "BearerTokenAuthorizer",
    "ClientOptions",
    "DiscoveryClient",
    "DiscoveryClientError",
    "FrozenHeaders",
    "Invocation",
    "Media",
    "MediaUpload",
    "MethodDescriptor",
    "MissingRequiredParameterError",
    "MultipartStream",
    "ParameterSpec",
    "PathTemplateError",
    "RequestCancelledError",
    "RequestDescriptor",
    "RequestUri",
    "Resource",
    "TokenData",
    "TransportError",
    "UploadEncodingError",
    "load_discovery",
]
