"""
Application-wide constants for the HMAC sensor datasource.

Resource paths and query parameter names are dictated by the remote
sensor API and must not be changed.
"""

# Equivalent to JavaScript's Date.toISOString(), used for signing, the Date
# header and the query time bounds.
ISO_FORMAT = "%Y-%m-%dT%H:%M:%S"
ISO_MILLIS_SUFFIX = "Z"

# Only GET is supported by the remote API
HTTP_METHOD = "GET"

# Separator between the fields of the string to sign
SIGNATURE_DELIMITER = "\n"

# Base path for indexing available resources
INDEX_NAME = "sites"

# Path to query for time series data
QUERY_PATH = "/observations"
QUERY_START = "from"
QUERY_END = "until"
QUERY_TAGS = "datastreamIds"

# Datastreams live under /site/{id}/datastreams (singular "site")
QUERY_ROOT = "site"
QUERY_COLLECTION = "datastreams"

# Output series field names
TIME_FIELD = "phenomenonTime"
VALUE_FIELD = "value"

# HTTP defaults
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_RETRIES = 0
DEFAULT_POOL_MAXSIZE = 10

# Status codes used in host-facing responses
STATUS_OK = 200
STATUS_BAD_REQUEST = 400
STATUS_INTERNAL_ERROR = 500
