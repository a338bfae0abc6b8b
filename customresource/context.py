import threading
import time
from typing import Any, Optional


class InvocationContext:
    """
    Carries the cancellation signal and the (optional) deadline of a single invocation. Provisioning functions
    receive it as their second argument and can use ``cancelled`` or ``wait`` to stop cooperatively. The status
    callback is never sent once the context is done, and is bounded by the remaining time.
    """

    deadline: Optional[float]
    lambda_context: Optional[Any]

    def __init__(self, deadline: float = None, lambda_context: Any = None):
        """
        :param deadline: absolute point in time (as returned by ``time.monotonic()``) after which the invocation
            is considered expired, or None for no deadline
        :param lambda_context: the context object of the hosting runtime, if any
        """
        self.deadline = deadline
        self.lambda_context = lambda_context
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, timeout: float) -> "InvocationContext":
        return cls(deadline=time.monotonic() + timeout)

    @classmethod
    def from_lambda_context(cls, lambda_context: Any) -> "InvocationContext":
        """
        Creates an InvocationContext from the context object the Lambda runtime passes to a handler. The
        deadline is derived from ``get_remaining_time_in_millis()`` if the object provides it.
        """
        if lambda_context is None:
            return cls()
        if isinstance(lambda_context, InvocationContext):
            return lambda_context

        get_remaining = getattr(lambda_context, "get_remaining_time_in_millis", None)
        if not callable(get_remaining):
            return cls(lambda_context=lambda_context)

        remaining_millis = get_remaining()
        return cls(
            deadline=time.monotonic() + remaining_millis / 1000.0, lambda_context=lambda_context
        )

    @property
    def request_id(self) -> str:
        """The request id the hosting runtime assigned to this invocation, if any."""
        return getattr(self.lambda_context, "aws_request_id", "") or ""

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining_time(self) -> Optional[float]:
        """Returns the remaining time in seconds until the deadline, or None if there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def wait(self, timeout: float = None) -> bool:
        """
        Blocks until the context is cancelled, the deadline passes, or the timeout elapses.

        :param timeout: the maximum time to wait in seconds
        :return: True if the context is done, False if the timeout elapsed first
        """
        remaining = self.remaining_time()
        if remaining is not None and (timeout is None or remaining < timeout):
            timeout = remaining
        self._cancelled.wait(timeout)
        return self.done

    def error_message(self) -> Optional[str]:
        """Describes why the context is done, or returns None if it is not."""
        if self.cancelled:
            return "context canceled"
        if self.expired:
            return "context deadline exceeded"
        return None

    def __repr__(self):
        return "InvocationContext(cancelled=%s, remaining_time=%s)" % (
            self.cancelled,
            self.remaining_time(),
        )
