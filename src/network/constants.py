"""HTTP constants for the request layer.

Centralizes status ranges, option defaults and content-type markers.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300

# Request option defaults
DEFAULT_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_USER_AGENT = "netreq/0.1"

# Upper bounds accepted by config validation
MAX_RETRIES = 20
MAX_RETRY_DELAY_MS = 5 * 60 * 1000
MAX_TIMEOUT_MS = 10 * 60 * 1000

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_TEXT = "text/plain"
CONTENT_TYPE_BINARY = "application/octet-stream"

# Substrings matched against the response content-type header
JSON_MARKER = "json"
TEXT_MARKER = "text"

COMPONENT_NETWORK = "network"
