from .auth import TokenData
from .discovery import (
    ApiDescriptor,
    MediaUpload,
    MethodDescriptor,
    ParameterSpec,
    ResourceDescriptor,
    load_discovery,
)
from .errors import (
    ApplicationError,
    DiscoveryClientError,
    MissingRequiredParameterError,
    PathTemplateError,
    RequestCancelledError,
    TransportError,
    UploadEncodingError,
)

__all__ = [
    "ApiDescriptor",
    "ApplicationError",
    "DiscoveryClientError",
    "MediaUpload",
    "MethodDescriptor",
    "MissingRequiredParameterError",
    "ParameterSpec",
    "PathTemplateError",
    "RequestCancelledError",
    "ResourceDescriptor",
    "TokenData",
    "TransportError",
    "UploadEncodingError",
    "load_discovery",
]
