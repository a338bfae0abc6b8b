import logging
from typing import Any, Mapping, Union

from customresource.context import InvocationContext
from customresource.invoker import ProvisioningFunction, safe_invoke
from customresource.models import decode_request
from customresource.options import HandlerConfig, Option, build_config
from customresource.responder import Responder

LOG = logging.getLogger(__name__)

Payload = Union[bytes, bytearray, str, Mapping[str, Any]]


class Handler:
    """
    Manages the lifecycle of a custom resource: decodes the lifecycle event, calls the provisioning function
    exactly once, and reports the outcome to the control plane. A Handler holds no state between invocations and
    can be used as Lambda handler directly::

        def provision(request: LifecycleRequest, context: InvocationContext) -> ProvisioningOutcome:
            if request.request_type == RequestType.CREATE:
                ...  # create the resource
            return ProvisioningOutcome(physical_resource_id="my-resource")

        handler = customresource.new(provision)

    Errors of the provisioning function are reported as FAILED to the control plane and never raised. The only
    errors that are raised are ``DecodeError`` (the event could not be decoded, nothing is reported) and
    ``DeliveryError`` (the status report could not be delivered).
    """

    fn: ProvisioningFunction
    config: HandlerConfig

    def __init__(self, fn: ProvisioningFunction, handler_config: HandlerConfig = None):
        self.fn = fn
        self.config = handler_config or HandlerConfig()
        self._responder = Responder(self.config)

    def invoke(self, payload: Payload, context: InvocationContext = None) -> None:
        """
        Processes a single lifecycle event.

        :param payload: the JSON document of the lifecycle event, raw or already parsed
        :param context: the invocation context, defaults to a context without deadline
        :raises DecodeError: if the payload is not a lifecycle event
        :raises DeliveryError: if the status report could not be delivered
        """
        request = decode_request(payload)
        context = context or InvocationContext()

        LOG.debug(
            "Invoking %s for %s %s (%s)",
            getattr(self.fn, "__name__", repr(self.fn)),
            request.request_type,
            request.logical_resource_id,
            request.resource_type,
        )
        result = safe_invoke(self.fn, request, context)
        self._responder.report(request, result, context)
        return None

    def __call__(self, event: Payload, lambda_context: Any = None) -> None:
        """Entry point for the Lambda runtime, which calls handlers with the event and its context object."""
        return self.invoke(event, InvocationContext.from_lambda_context(lambda_context))


def new(fn: ProvisioningFunction, *options: Option) -> Handler:
    """
    Creates a new Handler for the given provisioning function.

    :param fn: the provisioning function, called with the ``LifecycleRequest`` and the ``InvocationContext``
    :param options: options like ``with_output`` or ``with_transport`` applied over the defaults
    :return: the handler
    """
    return Handler(fn, build_config(*options))
