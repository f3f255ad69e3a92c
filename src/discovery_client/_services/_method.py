from logging import getLogger
from typing import Any, Dict, Mapping, Optional

from .._config import ClientOptions
from .._utils._assembler import assemble_request
from .._utils._media import build_upload
from .._utils._params import resolve_parameters
from .._utils._request_spec import RequestDescriptor
from .._utils._url import build_path
from .._utils.constants import PARAM_AUTH, QUERY_UPLOAD_TYPE
from ..models.discovery import MethodDescriptor
from ..models.errors import DiscoveryClientError
from ._base_service import BaseService
from ._invocation import Callback, Invocation


class ApiMethod:
    """A callable bound to one method descriptor.

    Calling it builds the request synchronously and returns an Invocation;
    construction failures are reported through the Invocation, never raised.

    Examples:
        >>> call = drive.files.get({"fileId": "abc123"}, updateViewedDate=True)
        >>> call.req.uri.query
        'updateViewedDate=true'
        >>> file = await call
    """

    def __init__(
        self,
        descriptor: MethodDescriptor,
        options: ClientOptions,
        service: BaseService,
    ) -> None:
        self._logger = getLogger("discovery_client")
        self.descriptor = descriptor
        self._options = options
        self._service = service

    @property
    def id(self) -> str:
        return self.descriptor.id

    def __call__(
        self,
        params: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callback] = None,
        **kwargs: Any,
    ) -> Invocation:
        if callable(params) and callback is None:
            params, callback = None, params
        if kwargs:
            params = {**(params or {}), **kwargs}

        try:
            request = self.build_request(params)
        except DiscoveryClientError as e:
            self._logger.debug(f"{self.id}: request construction failed: {e}")
            return Invocation.failed(e, callback)

        return Invocation(request, self._service, callback=callback)

    def build_request(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> RequestDescriptor:
        """Construct the request for a call without sending it.

        Raises:
            MissingRequiredParameterError: A required parameter is missing.
            PathTemplateError: A path placeholder has no value.
            UploadEncodingError: The media cannot be uploaded with this method.
        """
        descriptor = self.descriptor
        resolved = resolve_parameters(descriptor, self._options.params, params)
        upload = build_upload(resolved.reserved, descriptor)

        query_params: Dict[str, Any] = dict(resolved.query_params)
        if upload.upload_type is not None:
            template = descriptor.upload_path_template or descriptor.path_template
            query_params[QUERY_UPLOAD_TYPE] = upload.upload_type
        else:
            template = descriptor.path_template
        pathname, _ = build_path(template, resolved.path_params)

        return assemble_request(
            descriptor.http_method,
            descriptor.origin,
            pathname,
            query_params,
            headers=upload.headers,
            body=upload.body,
            auth=resolved.reserved.get(PARAM_AUTH, self._options.auth),
            api_key=self._options.api_key,
            params=params,
        )

    def __repr__(self) -> str:
        return f"<ApiMethod {self.id} {self.descriptor.http_method} {self.descriptor.path}>"
