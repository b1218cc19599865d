"""Internal constants shared across the library."""

BASE_URL = "http://localhost/api"
USER_AGENT = "pyrestore/1"
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_PAGE_SIZE = 20

HTTP_UNAUTHORIZED = 401

# User-facing messages for classified request failures.
MSG_SESSION_EXPIRED = "Session expired"
MSG_SERVER_BUSY = "Server busy"
MSG_NETWORK_ERROR = "Network error"
MSG_MALFORMED_RESPONSE = "Malformed response"
MSG_REQUEST_CANCELLED = "Request cancelled"
