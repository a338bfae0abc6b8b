"""
Calls the provisioning function of a handler, and turns every way it can end into a ``Result``.
"""
import logging
from typing import Callable

from customresource.context import InvocationContext
from customresource.exceptions import ContainmentError
from customresource.models import LifecycleRequest, ProvisioningOutcome
from customresource.utils.functions import Result, call_safe_with_result

LOG = logging.getLogger(__name__)

ProvisioningFunction = Callable[[LifecycleRequest, InvocationContext], ProvisioningOutcome]

# SystemExit is raised by sys.exit() in the provisioning function, which must not end the process mid-lifecycle.
# KeyboardInterrupt and GeneratorExit are not caused by the function, and propagate.
CONTAINED_EXCEPTIONS = (Exception, SystemExit)


def _checked_call(
    fn: ProvisioningFunction, request: LifecycleRequest, context: InvocationContext
) -> ProvisioningOutcome:
    outcome = fn(request, context)
    if not isinstance(outcome, ProvisioningOutcome):
        raise ContainmentError(
            "provisioning function returned %s instead of a ProvisioningOutcome"
            % type(outcome).__name__
        )
    return outcome


def safe_invoke(
    fn: ProvisioningFunction, request: LifecycleRequest, context: InvocationContext
) -> Result:
    """
    Calls ``fn`` once with the given request and context.

    If ``fn`` raises an exception, the exception itself becomes the error of the result, so its message is
    preserved. Abnormal terminations that do not carry an exception are replaced with a ``ContainmentError``
    that describes the value they carried.

    :param fn: the provisioning function
    :param request: the lifecycle request
    :param context: the invocation context
    :return: a Result with either the ProvisioningOutcome as value, or the error
    """
    result = call_safe_with_result(
        _checked_call,
        fn,
        request,
        context,
        message="%s: provisioning function %s failed"
        % (request.logical_resource_id, getattr(fn, "__name__", repr(fn))),
        exceptions=CONTAINED_EXCEPTIONS,
    )

    if result.has_error and not isinstance(result.error, Exception):
        if isinstance(result.error, SystemExit):
            return Result(error=ContainmentError("recovered from %s" % (result.error.code,)))
        return Result(error=ContainmentError("recovered from %r" % (result.error,)))

    return result


def failure_reason(error: BaseException) -> str:
    """Renders the reason of a FAILED status report from an error. The reason is never empty."""
    return str(error) or type(error).__name__
