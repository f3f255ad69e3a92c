from typing import Any, Optional, Sequence


class DiscoveryClientError(Exception):
    """Base class for every error raised by discovery_client."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class MissingRequiredParameterError(DiscoveryClientError):
    """A declared required parameter is absent after defaults and aliases are applied."""

    def __init__(self, method_id: str, parameters: Sequence[str]):
        self.method_id = method_id
        self.parameters = list(parameters)
        super().__init__(
            f"Missing required parameters: {', '.join(self.parameters)} "
            f"(method {method_id})"
        )


class PathTemplateError(DiscoveryClientError):
    """A path placeholder has no resolved value."""

    def __init__(self, template: str, placeholder: str):
        self.template = template
        self.placeholder = placeholder
        super().__init__(
            f"No value for path placeholder '{placeholder}' in '{template}'"
        )


class UploadEncodingError(DiscoveryClientError):
    """The media body cannot be encoded into an upload request."""


class TransportError(DiscoveryClientError):
    """Network level failure while exchanging the request.

    The original exception is available on ``cause`` (and as ``__cause__``).
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class RequestCancelledError(TransportError):
    """The exchange was cancelled before it settled."""


class ApplicationError(DiscoveryClientError):
    """The API answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: Any = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} (status {self.status_code})"
