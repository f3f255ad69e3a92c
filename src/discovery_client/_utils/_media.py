import json
import uuid
from collections.abc import AsyncIterable, Iterable
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, Iterator, Mapping, Optional

from ..models.discovery import MediaUpload, MethodDescriptor
from ..models.errors import UploadEncodingError
from .constants import (
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_MULTIPART_RELATED,
    CONTENT_TYPE_OCTET_STREAM,
    CONTENT_TYPE_TEXT,
    HEADER_CONTENT_TYPE,
    PARAM_MEDIA,
    PARAM_RESOURCE,
    STREAM_CHUNK_SIZE,
    UPLOAD_TYPE_MEDIA,
    UPLOAD_TYPE_MULTIPART,
)

_BINARY_TYPES = (bytes, bytearray, memoryview)


@dataclass(frozen=True)
class Media:
    body: Any = None
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class UploadPlan:
    """Body and headers chosen for a call.

    ``upload_type`` is ``None`` for ordinary requests, otherwise the value of
    the ``uploadType`` query parameter.
    """

    upload_type: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None


def to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def is_stream(body: Any) -> bool:
    if isinstance(body, (str, dict) + _BINARY_TYPES):
        return False
    return hasattr(body, "read") or isinstance(body, (Iterable, AsyncIterable))


def normalize_media(media: Any) -> Optional[Media]:
    if media is None:
        return None
    if isinstance(media, Media):
        return media
    if isinstance(media, Mapping):
        return Media(
            body=media.get("body"),
            mime_type=media.get("mimeType") or media.get("mime_type"),
        )
    return Media(
        body=getattr(media, "body", None),
        mime_type=getattr(media, "mime_type", None) or getattr(media, "mimeType", None),
    )


def iter_chunks(stream: Any) -> Iterator[bytes]:
    """Read a sync stream (file-like or iterable) as bytes chunks.

    Raises:
        UploadEncodingError: When the stream cannot be read.
    """
    try:
        if hasattr(stream, "read"):
            while True:
                chunk = stream.read(STREAM_CHUNK_SIZE)
                if not chunk:
                    break
                yield _to_bytes(chunk)
        else:
            for chunk in stream:
                yield _to_bytes(chunk)
    except OSError as e:
        raise UploadEncodingError(f"Unable to read media stream: {e}") from e


async def aiter_chunks(stream: Any) -> AsyncIterator[bytes]:
    """Async counterpart of iter_chunks; sync streams are read inline."""
    if isinstance(stream, AsyncIterable):
        try:
            async for chunk in stream:
                yield _to_bytes(chunk)
        except OSError as e:
            raise UploadEncodingError(f"Unable to read media stream: {e}") from e
    else:
        for chunk in iter_chunks(stream):
            yield chunk


def _to_bytes(chunk: Any) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    if isinstance(chunk, _BINARY_TYPES):
        return bytes(chunk)
    raise UploadEncodingError(
        f"Media stream yielded {type(chunk).__name__}, expected bytes or str"
    )


class MultipartStream:
    """A multipart/related body whose media part is read from a stream.

    Only the JSON metadata part is known up front. The media stream is read
    once, while the request is being sent; iterating a second time raises
    UploadEncodingError.
    """

    def __init__(self, boundary: str, metadata: str, mime_type: str, stream: Any):
        self.boundary = boundary
        self.mime_type = mime_type
        self.stream = stream
        self.preamble = _part_head(boundary, metadata, mime_type)
        self.epilogue = _part_tail(boundary)
        self._consumed = False

    def _claim(self) -> None:
        if self._consumed:
            raise UploadEncodingError("Multipart media stream can only be read once")
        self._consumed = True

    def __iter__(self) -> Iterator[bytes]:
        self._claim()
        yield self.preamble
        yield from iter_chunks(self.stream)
        yield self.epilogue

    async def __aiter__(self) -> AsyncIterator[bytes]:
        self._claim()
        yield self.preamble
        async for chunk in aiter_chunks(self.stream):
            yield chunk
        yield self.epilogue

    def __repr__(self) -> str:
        return f"MultipartStream(boundary={self.boundary!r}, mime_type={self.mime_type!r})"


def _part_head(boundary: str, metadata: str, mime_type: str) -> bytes:
    return (
        f"--{boundary}\r\n"
        f"{HEADER_CONTENT_TYPE}: {CONTENT_TYPE_JSON}\r\n\r\n"
        f"{metadata}\r\n"
        f"--{boundary}\r\n"
        f"{HEADER_CONTENT_TYPE}: {mime_type}\r\n\r\n"
    ).encode("utf-8")


def _part_tail(boundary: str) -> bytes:
    return f"\r\n--{boundary}--".encode("utf-8")


def encode_multipart(boundary: str, metadata: str, mime_type: str, body: Any) -> bytes:
    """Encode a fully known multipart/related body (JSON part, then media part)."""
    content = body.encode("utf-8") if isinstance(body, str) else bytes(body)
    return _part_head(boundary, metadata, mime_type) + content + _part_tail(boundary)


def _check_media(media: Media, upload: MediaUpload, method_id: str) -> None:
    body = media.body
    if not isinstance(body, (str,) + _BINARY_TYPES) and not is_stream(body):
        raise UploadEncodingError(
            f"Unsupported media body type {type(body).__name__} for {method_id}"
        )
    if media.mime_type and not upload.accepts(media.mime_type):
        raise UploadEncodingError(
            f"Media type '{media.mime_type}' is not accepted by {method_id} "
            f"(accepts {', '.join(upload.accept)})"
        )
    limit = upload.max_size_bytes
    if limit is not None and not is_stream(body):
        size = len(body.encode("utf-8")) if isinstance(body, str) else len(body)
        if size > limit:
            raise UploadEncodingError(
                f"Media body of {size} bytes exceeds the {upload.max_size} limit of {method_id}"
            )


def build_upload(
    reserved: Mapping[str, Any], descriptor: MethodDescriptor
) -> UploadPlan:
    """Decide the upload shape of a call and encode its body.

    =========  =====  =========================================
    resource   media  outcome
    =========  =====  =========================================
    no         no     no body
    no         yes    ``uploadType=media``, media body verbatim
    yes        yes    ``uploadType=multipart``, JSON + media parts
    yes        no     resource as the JSON request body
    =========  =====  =========================================

    A media object without a body counts as no media.
    """
    resource = reserved.get(PARAM_RESOURCE)
    media = normalize_media(reserved.get(PARAM_MEDIA))

    if media is None or media.body is None:
        if resource is None:
            return UploadPlan()
        return UploadPlan(
            headers={HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON}, body=to_json(resource)
        )

    upload = descriptor.media_upload
    if upload is None:
        raise UploadEncodingError(f"Method {descriptor.id} does not support media upload")
    _check_media(media, upload, descriptor.id)

    if resource is None:
        if media.mime_type:
            content_type = media.mime_type
        elif isinstance(media.body, str):
            content_type = CONTENT_TYPE_TEXT
        else:
            content_type = CONTENT_TYPE_OCTET_STREAM
        body = media.body
        if isinstance(body, (bytearray, memoryview)):
            body = bytes(body)
        return UploadPlan(
            upload_type=UPLOAD_TYPE_MEDIA,
            headers={HEADER_CONTENT_TYPE: content_type},
            body=body,
        )

    if not upload.multipart:
        raise UploadEncodingError(f"Method {descriptor.id} does not support multipart upload")

    mime_type = media.mime_type
    if not mime_type and isinstance(resource, Mapping):
        mime_type = resource.get("mimeType")
    mime_type = mime_type or CONTENT_TYPE_TEXT

    boundary = uuid.uuid4().hex
    metadata = to_json(resource)
    if is_stream(media.body):
        body: Any = MultipartStream(boundary, metadata, mime_type, media.body)
    else:
        body = encode_multipart(boundary, metadata, mime_type, media.body)

    return UploadPlan(
        upload_type=UPLOAD_TYPE_MULTIPART,
        headers={
            HEADER_CONTENT_TYPE: f"{CONTENT_TYPE_MULTIPART_RELATED}; boundary={boundary}"
        },
        body=body,
    )
