from customresource.version import __version__  # noqa: F401 isort:skip

from customresource.context import InvocationContext
from customresource.exceptions import (
    ContainmentError,
    CustomResourceError,
    DecodeError,
    DeliveryError,
    ProvisioningError,
)
from customresource.handler import Handler, ProvisioningFunction, new
from customresource.models import (
    LifecycleRequest,
    ProvisioningOutcome,
    RequestType,
    Status,
    StatusReport,
    decode_request,
    encode_request,
)
from customresource.options import HandlerConfig, with_output, with_timeout, with_transport

__all__ = [
    "ContainmentError",
    "CustomResourceError",
    "DecodeError",
    "DeliveryError",
    "Handler",
    "HandlerConfig",
    "InvocationContext",
    "LifecycleRequest",
    "ProvisioningError",
    "ProvisioningFunction",
    "ProvisioningOutcome",
    "RequestType",
    "Status",
    "StatusReport",
    "decode_request",
    "encode_request",
    "new",
    "with_output",
    "with_timeout",
    "with_transport",
]
