import customresource

# customresource version
VERSION = customresource.__version__

# request types sent by the control plane
REQUEST_TYPE_CREATE = "Create"
REQUEST_TYPE_UPDATE = "Update"
REQUEST_TYPE_DELETE = "Delete"

# values of the Status field of a status report
STATUS_SUCCESS = "SUCCESS"
STATUS_FAILED = "FAILED"

# headers of the status callback
HEADER_CONTENT_TYPE = "Content-Type"
APPLICATION_JSON = "application/json"

# the control plane rejects status reports with a body larger than this (in bytes)
MAX_RESPONSE_SIZE = 4096

# default timeout (in seconds) of the status callback
DEFAULT_CALLBACK_TIMEOUT = 30.0

# truthy/falsy strings for environment variables
TRUE_STRINGS = ("1", "true", "True")
FALSE_STRINGS = ("0", "false", "False")

# log levels accepted by CR_LOG
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")

CR_LOG_TRACE = "trace"
TRACE_LOG_LEVELS = [CR_LOG_TRACE]
