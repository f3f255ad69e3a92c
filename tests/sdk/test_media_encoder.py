import io

import pytest

from discovery_client import (
    Media,
    MediaUpload,
    MethodDescriptor,
    MultipartStream,
    UploadEncodingError,
)
from discovery_client._utils._media import (
    aiter_chunks,
    build_upload,
    encode_multipart,
    is_stream,
    iter_chunks,
    normalize_media,
)


class UnreadableStream:
    def read(self, size: int = -1) -> bytes:
        raise OSError("disk gone")


@pytest.fixture
def upload_method() -> MethodDescriptor:
    return MethodDescriptor(
        id="photos.upload",
        http_method="POST",
        path="photos",
        root_url="https://example.googleapis.com/",
        service_path="photos/v1/",
        media_upload=MediaUpload(accept=("image/*",), max_size="1KB"),
    )


@pytest.fixture
def simple_only_method() -> MethodDescriptor:
    return MethodDescriptor(
        id="blobs.put",
        http_method="PUT",
        path="blobs",
        root_url="https://example.googleapis.com/",
        media_upload=MediaUpload(multipart=False),
    )


class TestNormalizeMedia:
    def test_mapping(self):
        assert normalize_media({"mimeType": "text/csv", "body": "a,b"}) == Media(
            body="a,b", mime_type="text/csv"
        )

    def test_snake_case_mapping(self):
        assert normalize_media({"mime_type": "text/csv"}).mime_type == "text/csv"

    def test_media_instance(self):
        media = Media(body=b"x")
        assert normalize_media(media) is media

    def test_none(self):
        assert normalize_media(None) is None


class TestIsStream:
    def test_strings_and_bytes_are_not_streams(self):
        assert not is_stream("x")
        assert not is_stream(b"x")
        assert not is_stream({"a": 1})

    def test_file_and_iterables_are_streams(self):
        assert is_stream(io.BytesIO(b"x"))
        assert is_stream(iter([b"x"]))


class TestChunks:
    def test_file_like(self):
        assert b"".join(iter_chunks(io.BytesIO(b"hello"))) == b"hello"

    def test_text_chunks_are_encoded(self):
        assert list(iter_chunks(["hé", b"!"])) == ["hé".encode("utf-8"), b"!"]

    def test_bad_chunk(self):
        with pytest.raises(UploadEncodingError, match="int"):
            list(iter_chunks([1]))

    @pytest.mark.asyncio
    async def test_async_iterable(self):
        async def produce():
            yield b"a"
            yield "b"

        assert [chunk async for chunk in aiter_chunks(produce())] == [b"a", b"b"]

    def test_read_failure(self):
        with pytest.raises(UploadEncodingError, match="disk gone") as exc_info:
            list(iter_chunks(UnreadableStream()))
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_async_read_failure(self):
        async def produce():
            yield b"a"
            raise OSError("socket closed")

        with pytest.raises(UploadEncodingError, match="socket closed"):
            [chunk async for chunk in aiter_chunks(produce())]


class TestEncodeMultipart:
    def test_layout(self):
        body = encode_multipart("XYZ", '{"a":1}', "text/plain", "hi")
        assert body == (
            b"--XYZ\r\n"
            b"Content-Type: application/json\r\n\r\n"
            b'{"a":1}\r\n'
            b"--XYZ\r\n"
            b"Content-Type: text/plain\r\n\r\n"
            b"hi\r\n"
            b"--XYZ--"
        )


class TestMultipartStream:
    def test_sync_iteration(self):
        stream = MultipartStream("B", "{}", "text/plain", io.BytesIO(b"data"))
        assert b"".join(stream) == encode_multipart("B", "{}", "text/plain", b"data")

    @pytest.mark.asyncio
    async def test_async_iteration(self):
        stream = MultipartStream("B", "{}", "text/plain", io.BytesIO(b"data"))
        chunks = [chunk async for chunk in stream]
        assert b"".join(chunks) == encode_multipart("B", "{}", "text/plain", b"data")

    def test_read_only_once(self):
        stream = MultipartStream("B", "{}", "text/plain", io.BytesIO(b"data"))
        list(stream)
        with pytest.raises(UploadEncodingError, match="once"):
            list(stream)

    def test_read_failure(self):
        stream = MultipartStream("B", "{}", "text/plain", UnreadableStream())
        with pytest.raises(UploadEncodingError, match="disk gone"):
            b"".join(stream)

    @pytest.mark.asyncio
    async def test_async_read_failure(self):
        stream = MultipartStream("B", "{}", "text/plain", UnreadableStream())
        with pytest.raises(UploadEncodingError, match="disk gone"):
            [chunk async for chunk in stream]


class TestBuildUpload:
    def test_nothing(self, upload_method: MethodDescriptor):
        plan = build_upload({}, upload_method)
        assert plan.upload_type is None
        assert plan.body is None
        assert plan.headers == {}

    def test_media_without_body_is_ignored(self, upload_method: MethodDescriptor):
        plan = build_upload({"media": {"mimeType": "image/png"}}, upload_method)
        assert plan.upload_type is None

    def test_resource_only(self, upload_method: MethodDescriptor):
        plan = build_upload({"resource": {"title": "x", "n": 1}}, upload_method)
        assert plan.upload_type is None
        assert plan.body == '{"title":"x","n":1}'
        assert plan.headers == {"Content-Type": "application/json"}

    def test_simple_media(self, upload_method: MethodDescriptor):
        plan = build_upload(
            {"media": {"mimeType": "image/png", "body": b"PNG"}}, upload_method
        )
        assert plan.upload_type == "media"
        assert plan.body == b"PNG"
        assert plan.headers == {"Content-Type": "image/png"}

    @pytest.mark.parametrize("buffer_type", [bytearray, memoryview])
    def test_simple_media_buffers_become_bytes(
        self, upload_method: MethodDescriptor, buffer_type
    ):
        plan = build_upload(
            {"media": {"mimeType": "image/png", "body": buffer_type(b"PNG")}},
            upload_method,
        )
        assert plan.body == b"PNG"
        assert type(plan.body) is bytes

    def test_multipart_mime_from_resource(self, upload_method: MethodDescriptor):
        plan = build_upload(
            {"resource": {"mimeType": "image/gif"}, "media": {"body": b"GIF"}},
            upload_method,
        )
        assert plan.upload_type == "multipart"
        assert b"Content-Type: image/gif\r\n\r\nGIF" in plan.body

    def test_multipart_stream(self, upload_method: MethodDescriptor):
        plan = build_upload(
            {"resource": {}, "media": {"mimeType": "image/png", "body": io.BytesIO(b"P")}},
            upload_method,
        )
        assert isinstance(plan.body, MultipartStream)
        assert plan.headers["Content-Type"] == (
            f"multipart/related; boundary={plan.body.boundary}"
        )

    def test_streams_skip_size_check(self, upload_method: MethodDescriptor):
        plan = build_upload(
            {"media": {"mimeType": "image/png", "body": io.BytesIO(b"x" * 4096)}},
            upload_method,
        )
        assert plan.upload_type == "media"

    def test_size_limit(self, upload_method: MethodDescriptor):
        with pytest.raises(UploadEncodingError, match="1KB"):
            build_upload(
                {"media": {"mimeType": "image/png", "body": b"x" * 1025}}, upload_method
            )

    def test_accept_patterns(self, upload_method: MethodDescriptor):
        with pytest.raises(UploadEncodingError, match="text/plain"):
            build_upload({"media": {"mimeType": "text/plain", "body": "x"}}, upload_method)

    def test_multipart_not_supported(self, simple_only_method: MethodDescriptor):
        with pytest.raises(UploadEncodingError, match="multipart"):
            build_upload({"resource": {}, "media": {"body": "x"}}, simple_only_method)
