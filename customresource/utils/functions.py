import logging
from typing import Any, Callable, NamedTuple, Optional, Tuple, Type

LOG = logging.getLogger(__name__)


class Result(NamedTuple):
    """The outcome of a guarded call: the returned value, or the exception the call ended with."""

    error: Optional[BaseException]
    value: Any = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


def call_safe_with_result(
    func: Callable,
    *args,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    message: str = None,
    **kwargs,
) -> Result:
    """
    Calls ``func`` with the given arguments and captures any of the given ``exceptions`` in the returned ``Result``.
    Other exceptions propagate. A captured exception is logged with ``message``, with its traceback if the logger
    is enabled for DEBUG.
    """
    try:
        return Result(error=None, value=func(*args, **kwargs))
    except exceptions as e:
        message = message or "error calling %s" % getattr(func, "__name__", repr(func))
        LOG.warning("%s: %s", message, e, exc_info=LOG.isEnabledFor(logging.DEBUG))
        return Result(error=e)


def call_safe(func: Callable, *args, message: str = None, **kwargs) -> Optional[Any]:
    """Like ``call_safe_with_result``, but returns the value of the call, or None if it failed."""
    return call_safe_with_result(func, *args, message=message, **kwargs).value
