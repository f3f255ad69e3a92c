"""Descriptor models for discovery-driven APIs.

A discovery document describes an API as a tree of resources, each carrying
methods with a verb, a path template and a parameter schema. These models are
the immutable, parsed form of that tree; they are built once per API and
shared read-only by every call made through it.
"""

import fnmatch
import json
import re
from pathlib import Path
from typing import Any, Dict, Iterator, Literal, Optional, Tuple, Union

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .._utils.constants import RESERVED_PARAMETERS

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*([KMGT]?B)?\s*$", re.IGNORECASE)
_SIZE_UNITS = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}


def _join_paths(*parts: str) -> str:
    segments = [part.strip("/") for part in parts if part and part.strip("/")]
    return "/" + "/".join(segments)


class ParameterSpec(BaseModel):
    """A single declared method parameter."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: Literal["path", "query"] = "query"
    required: bool = False
    repeated: bool = False
    alias: Optional[str] = None
    type: Optional[str] = None
    description: str = ""


class MediaUpload(BaseModel):
    """Upload capability of a method."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    accept: Tuple[str, ...] = Field(
        default=(), validation_alias=AliasChoices("accept", "accepts")
    )
    max_size: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("maxSize", "max_size")
    )
    path: Optional[str] = None
    multipart: bool = True

    def accepts(self, mime_type: str) -> bool:
        """Check a media type against the accepted patterns (``*/*``, ``image/*``...)."""
        if not self.accept:
            return True
        mime_type = mime_type.split(";", 1)[0].strip().lower()
        return any(
            fnmatch.fnmatchcase(mime_type, pattern.lower()) for pattern in self.accept
        )

    @property
    def max_size_bytes(self) -> Optional[int]:
        if not self.max_size:
            return None
        match = _SIZE_PATTERN.match(self.max_size)
        if match is None:
            return None
        unit = (match.group(2) or "B").upper()
        return int(match.group(1)) * _SIZE_UNITS[unit]


class MethodDescriptor(BaseModel):
    """Static description of one API method.

    ``path`` is relative to ``root_url`` + ``service_path``; the upload path,
    when the method supports media, is relative to ``root_url``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    http_method: str = Field(validation_alias=AliasChoices("httpMethod", "http_method"))
    path: str
    parameters: Tuple[ParameterSpec, ...] = ()
    media_upload: Optional[MediaUpload] = Field(
        default=None, validation_alias=AliasChoices("mediaUpload", "media_upload")
    )
    root_url: str = Field(validation_alias=AliasChoices("rootUrl", "root_url"))
    service_path: str = Field(
        default="", validation_alias=AliasChoices("servicePath", "service_path")
    )
    description: str = ""

    @property
    def origin(self) -> str:
        url = httpx.URL(self.root_url)
        return f"{url.scheme}://{url.netloc.decode('ascii')}"

    @property
    def base_url(self) -> str:
        root_path = httpx.URL(self.root_url).path
        return self.origin + _join_paths(root_path, self.service_path).rstrip("/") + "/"

    @property
    def path_template(self) -> str:
        return _join_paths(httpx.URL(self.root_url).path, self.service_path, self.path)

    @property
    def upload_path_template(self) -> Optional[str]:
        if self.media_upload is None:
            return None
        root_path = httpx.URL(self.root_url).path
        if self.media_upload.path:
            return _join_paths(root_path, self.media_upload.path)
        return _join_paths(root_path, "upload", self.service_path, self.path)

    @property
    def upload_url(self) -> Optional[str]:
        template = self.upload_path_template
        return None if template is None else self.origin + template

    @property
    def supports_media_upload(self) -> bool:
        return self.media_upload is not None

    def parameter(self, name: str) -> Optional[ParameterSpec]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def required_parameters(self) -> Tuple[ParameterSpec, ...]:
        return tuple(p for p in self.parameters if p.required)

    def alias_map(self) -> Dict[str, str]:
        """Map every accepted alias to its canonical parameter name.

        Reserved names can always be addressed with a trailing underscore
        (``resource_`` for a query parameter called ``resource``).
        """
        aliases = {f"{name}_": name for name in RESERVED_PARAMETERS}
        for param in self.parameters:
            if param.alias:
                aliases[param.alias] = param.name
        return aliases

    def with_root_url(self, root_url: str) -> "MethodDescriptor":
        return self.model_copy(update={"root_url": root_url})


class ResourceDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    methods: Dict[str, MethodDescriptor] = {}
    resources: Dict[str, "ResourceDescriptor"] = {}

    def iter_methods(self) -> Iterator[MethodDescriptor]:
        yield from self.methods.values()
        for resource in self.resources.values():
            yield from resource.iter_methods()


class ApiDescriptor(ResourceDescriptor):
    """A whole API: its roots, global parameters and resource tree."""

    name: str = ""
    version: str = ""
    title: str = ""
    root_url: str
    service_path: str = ""
    parameters: Tuple[ParameterSpec, ...] = ()

    def find_method(self, method_id: str) -> Optional[MethodDescriptor]:
        for method in self.iter_methods():
            if method.id == method_id:
                return method
        return None

    def with_root_url(self, root_url: str) -> "ApiDescriptor":
        """Rebase every method of the API onto another root URL."""
        return self.model_copy(
            update={
                "root_url": root_url,
                "methods": {
                    name: method.with_root_url(root_url)
                    for name, method in self.methods.items()
                },
                "resources": {
                    name: _rebase_resource(resource, root_url)
                    for name, resource in self.resources.items()
                },
            }
        )

    @classmethod
    def from_discovery(cls, document: Dict[str, Any]) -> "ApiDescriptor":
        """Parse a discovery document into an ApiDescriptor.

        Args:
            document: The decoded discovery document.

        Returns:
            ApiDescriptor: The parsed API, with every method carrying the API's
                root URL, service path and global parameters.
        """
        root_url = document.get("rootUrl") or document.get("baseUrl")
        if not root_url:
            raise ValueError("Discovery document has no rootUrl")
        service_path = document.get("servicePath", "")
        api_params = tuple(
            _parse_parameter(name, raw)
            for name, raw in document.get("parameters", {}).items()
        )
        context = (root_url, service_path, api_params)

        return cls(
            name=document.get("name", ""),
            version=document.get("version", ""),
            title=document.get("title", ""),
            root_url=root_url,
            service_path=service_path,
            parameters=api_params,
            methods=_parse_methods(document.get("methods", {}), context),
            resources=_parse_resources(document.get("resources", {}), context),
        )


def load_discovery(path: Union[str, Path]) -> ApiDescriptor:
    """Read a discovery document from a local JSON file."""
    text = Path(path).read_text(encoding="utf-8")
    return ApiDescriptor.from_discovery(json.loads(text))


def _rebase_resource(resource: ResourceDescriptor, root_url: str) -> ResourceDescriptor:
    return ResourceDescriptor(
        methods={
            name: method.with_root_url(root_url)
            for name, method in resource.methods.items()
        },
        resources={
            name: _rebase_resource(child, root_url)
            for name, child in resource.resources.items()
        },
    )


def _parse_parameter(name: str, raw: Dict[str, Any]) -> ParameterSpec:
    alias = raw.get("alias")
    if alias is None and name in RESERVED_PARAMETERS:
        alias = f"{name}_"
    return ParameterSpec(
        name=name,
        location=raw.get("location", "query"),
        required=raw.get("required", False),
        repeated=raw.get("repeated", False),
        alias=alias,
        type=raw.get("type"),
        description=raw.get("description", ""),
    )


def _parse_media_upload(raw: Optional[Dict[str, Any]]) -> Optional[MediaUpload]:
    if not raw:
        return None
    simple = raw.get("protocols", {}).get("simple", {})
    return MediaUpload(
        accept=tuple(raw.get("accept", ())),
        max_size=raw.get("maxSize"),
        path=simple.get("path") or raw.get("path"),
        multipart=simple.get("multipart", True),
    )


def _parse_methods(
    raw_methods: Dict[str, Any], context: Tuple[str, str, Tuple[ParameterSpec, ...]]
) -> Dict[str, MethodDescriptor]:
    root_url, service_path, api_params = context
    methods = {}
    for name, raw in raw_methods.items():
        params = [_parse_parameter(n, p) for n, p in raw.get("parameters", {}).items()]
        declared = {p.name for p in params}
        params.extend(p for p in api_params if p.name not in declared)

        methods[name] = MethodDescriptor(
            id=raw.get("id", name),
            http_method=raw.get("httpMethod", "GET"),
            path=raw.get("path", raw.get("flatPath", "")),
            parameters=tuple(params),
            media_upload=_parse_media_upload(raw.get("mediaUpload")),
            root_url=root_url,
            service_path=service_path,
            description=raw.get("description", ""),
        )
    return methods


def _parse_resources(
    raw_resources: Dict[str, Any], context: Tuple[str, str, Tuple[ParameterSpec, ...]]
) -> Dict[str, ResourceDescriptor]:
    return {
        name: ResourceDescriptor(
            methods=_parse_methods(raw.get("methods", {}), context),
            resources=_parse_resources(raw.get("resources", {}), context),
        )
        for name, raw in raw_resources.items()
    }
