"""Internal constants shared across the relay."""

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 1111
PRODUCER_PATH = "/browsers"
CONSUMER_PATH = "/apps"

# ------------------------------------------------------------------
# Wire event names
# ------------------------------------------------------------------

EVENT_REQUEST = "data.req"
EVENT_RESPONSE = "data.res"
EVENT_UPDATE = "data.update"
EVENT_PRODUCER_ERROR = "data.err"
EVENT_ROUTER_ERROR = "server.err"

# Payload key carrying the correlation id.
CORRELATION_KEY = "id"

ROUTER_ERROR_TYPE = "SERVER_ERROR"
NO_PRODUCER_MESSAGE = "no available producer"

# Payloads longer than this are cut in non-verbose log lines.
TRUNCATE_LENGTH = 50
