# Reserved call parameters, consumed by the engine and never serialized
PARAM_RESOURCE = "resource"
PARAM_MEDIA = "media"
PARAM_AUTH = "auth"
RESERVED_PARAMETERS = (PARAM_RESOURCE, PARAM_MEDIA, PARAM_AUTH)

# Query parameters injected by the engine
QUERY_UPLOAD_TYPE = "uploadType"
QUERY_API_KEY = "key"
QUERY_ALT = "alt"

UPLOAD_TYPE_MEDIA = "media"
UPLOAD_TYPE_MULTIPART = "multipart"

# Headers
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_AUTHORIZATION = "Authorization"
HEADER_USER_AGENT = "User-Agent"
HEADER_ACCEPT = "Accept"

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_TEXT = "text/plain"
CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"
CONTENT_TYPE_MULTIPART_RELATED = "multipart/related"

# Environment variables
ENV_API_KEY = "DISCOVERY_API_KEY"
ENV_ROOT_URL = "DISCOVERY_ROOT_URL"

STREAM_CHUNK_SIZE = 64 * 1024
