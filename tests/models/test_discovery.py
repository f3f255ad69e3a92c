import pytest

from discovery_client import ApiDescriptor, MediaUpload, MethodDescriptor, load_discovery


class TestApiDescriptor:
    def test_metadata(self, discovery_path):
        api = load_discovery(discovery_path("drive-v2"))

        assert api.name == "drive"
        assert api.version == "v2"
        assert api.root_url == "https://www.googleapis.com/"
        assert api.service_path == "drive/v2/"

    def test_method_params_then_global_params(self, discovery_path):
        api = load_discovery(discovery_path("drive-v2"))
        method = api.find_method("drive.files.get")

        assert method is not None
        names = [p.name for p in method.parameters]
        assert names.index("fileId") < names.index("alt")
        assert method.parameter("fileId").required
        assert method.parameter("fileId").location == "path"

    def test_iter_methods_covers_nested_resources(self, discovery_path):
        api = load_discovery(discovery_path("oauth2-v2"))
        ids = {method.id for method in api.iter_methods()}

        assert {"oauth2.tokeninfo", "oauth2.userinfo.get", "oauth2.userinfo.v2.me.get"} <= ids

    def test_find_unknown_method(self, discovery_path):
        assert load_discovery(discovery_path("drive-v2")).find_method("nope") is None

    def test_media_upload_is_parsed(self, discovery_path):
        method = load_discovery(discovery_path("gmail-v1")).find_method(
            "gmail.users.drafts.create"
        )

        assert method is not None
        assert method.supports_media_upload
        assert method.media_upload.accept == ("message/rfc822",)
        assert method.media_upload.max_size_bytes == 35 * 1024 * 1024
        assert method.upload_path_template == "/upload/gmail/v1/users/{userId}/drafts"
        assert method.upload_url == (
            "https://www.googleapis.com/upload/gmail/v1/users/{userId}/drafts"
        )

    def test_reserved_parameter_names_get_alias(self):
        api = ApiDescriptor.from_discovery(
            {
                "rootUrl": "https://example.com/",
                "methods": {
                    "search": {
                        "id": "example.search",
                        "path": "search",
                        "httpMethod": "GET",
                        "parameters": {"resource": {"type": "string", "location": "query"}},
                    }
                },
            }
        )

        assert api.methods["search"].parameter("resource").alias == "resource_"

    def test_missing_root_url(self):
        with pytest.raises(ValueError, match="rootUrl"):
            ApiDescriptor.from_discovery({"name": "x"})

    def test_with_root_url(self, discovery_path):
        api = load_discovery(discovery_path("gmail-v1")).with_root_url(
            "http://localhost:8080/prefix/"
        )
        method = api.find_method("gmail.users.drafts.create")

        assert api.root_url == "http://localhost:8080/prefix/"
        assert method.origin == "http://localhost:8080"
        assert method.path_template == "/prefix/gmail/v1/users/{userId}/drafts"
        assert method.upload_path_template == (
            "/prefix/upload/gmail/v1/users/{userId}/drafts"
        )


class TestMethodDescriptor:
    @pytest.fixture
    def method(self) -> MethodDescriptor:
        return MethodDescriptor.model_validate(
            {
                "id": "pubsub.projects.topics.publish",
                "httpMethod": "POST",
                "path": "v1/{+topic}:publish",
                "rootUrl": "https://pubsub.googleapis.com/",
                "servicePath": "",
                "parameters": [
                    {"name": "topic", "location": "path", "required": True},
                    {"name": "alt"},
                ],
            }
        )

    def test_camel_case_fields(self, method: MethodDescriptor):
        assert method.http_method == "POST"
        assert method.root_url == "https://pubsub.googleapis.com/"

    def test_paths(self, method: MethodDescriptor):
        assert method.origin == "https://pubsub.googleapis.com"
        assert method.base_url == "https://pubsub.googleapis.com/"
        assert method.path_template == "/v1/{+topic}:publish"
        assert method.upload_path_template is None
        assert not method.supports_media_upload

    def test_required_parameters(self, method: MethodDescriptor):
        assert [p.name for p in method.required_parameters()] == ["topic"]

    def test_alias_map_escapes_reserved_names(self, method: MethodDescriptor):
        assert method.alias_map() == {
            "resource_": "resource",
            "media_": "media",
            "auth_": "auth",
        }

    def test_frozen(self, method: MethodDescriptor):
        with pytest.raises(Exception):
            method.path = "other"


class TestMediaUpload:
    @pytest.mark.parametrize(
        "mime_type, accepted",
        [
            ("image/png", True),
            ("IMAGE/JPEG", True),
            ("image/png; charset=binary", True),
            ("text/plain", False),
        ],
    )
    def test_accepts(self, mime_type, accepted):
        assert MediaUpload(accept=("image/*",)).accepts(mime_type) is accepted

    def test_accepts_anything_without_patterns(self):
        assert MediaUpload().accepts("application/zip")

    @pytest.mark.parametrize(
        "max_size, expected",
        [("10MB", 10 * 1024**2), ("5120GB", 5120 * 1024**3), ("512", 512), (None, None)],
    )
    def test_max_size_bytes(self, max_size, expected):
        assert MediaUpload(max_size=max_size).max_size_bytes == expected
