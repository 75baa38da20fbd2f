"""Internal constants shared across the library."""

DEFAULT_ENDPOINT_URL = "https://token.services.mozilla.com/1.0/sync/1.5"
USER_AGENT = "pytokenserver/1.0"
DEFAULT_REQUEST_TIMEOUT = 30.0

AUTHORIZATION_SCHEME = "BrowserID"
CONTENT_TYPE_JSON = "application/json"

TIMESTAMP_HEADER = "X-Timestamp"
CLIENT_STATE_HEADER = "X-Client-State"
# Checked in order; the first parseable value wins.
BACKOFF_HEADERS: tuple[str, ...] = ("Retry-After", "X-Backoff", "X-Weave-Backoff")

# Timestamps are milliseconds stored in an unsigned 64-bit range.
MAX_TIMESTAMP = 2**64 - 1
