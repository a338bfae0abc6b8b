"""
Configuration of a ``Handler``. A ``HandlerConfig`` is immutable; options are functions that take a config and
return an updated copy, and are applied in order over the defaults when the handler is created.
"""
import dataclasses
import io
import logging
from dataclasses import dataclass, field
from typing import IO, Callable, Optional

from customresource import config
from customresource.http.client import HttpClient, SimpleRequestsClient

LOG = logging.getLogger(__name__)


class DiscardOutput(io.RawIOBase):
    """A byte sink that discards everything written to it."""

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        return len(b)


class TextOutputAdapter(io.RawIOBase):
    """Adapts a text stream without a binary buffer (e.g., a ``StringIO``) to the byte sink interface."""

    def __init__(self, stream: IO[str]):
        super(TextOutputAdapter, self).__init__()
        self.stream = stream

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        self.stream.write(bytes(b).decode(config.DEFAULT_ENCODING, errors="replace"))
        return len(b)

    def flush(self):
        self.stream.flush()


def as_byte_sink(output) -> IO[bytes]:
    """
    Returns a byte sink for the given output. Text streams are accepted as well: their underlying binary buffer
    is used if there is one (like for ``sys.stdout``), otherwise the bytes are decoded and written as text.
    """
    if isinstance(output, io.TextIOBase):
        buffer = getattr(output, "buffer", None)
        if buffer is not None:
            return buffer
        return TextOutputAdapter(output)
    return output


@dataclass(frozen=True)
class HandlerConfig:
    """
    :param output: the byte sink that receives the human-readable progress of each invocation
    :param transport: the HTTP client used to deliver status reports
    :param timeout: the timeout in seconds for delivering a status report
    """

    output: IO[bytes] = field(default_factory=DiscardOutput)
    transport: HttpClient = field(default_factory=SimpleRequestsClient)
    timeout: Optional[float] = field(default_factory=lambda: config.CALLBACK_TIMEOUT)


Option = Callable[[HandlerConfig], HandlerConfig]


def with_output(output) -> Option:
    """Writes the progress of each invocation to the given sink. ``None`` keeps the current sink."""

    def _apply(handler_config: HandlerConfig) -> HandlerConfig:
        if output is None:
            return handler_config
        return dataclasses.replace(handler_config, output=as_byte_sink(output))

    return _apply


def with_transport(transport: HttpClient) -> Option:
    """Delivers status reports using the given HTTP client. ``None`` keeps the current transport."""

    def _apply(handler_config: HandlerConfig) -> HandlerConfig:
        if transport is None:
            return handler_config
        return dataclasses.replace(handler_config, transport=transport)

    return _apply


def with_timeout(timeout: float) -> Option:
    """Bounds the delivery of status reports to the given number of seconds. ``None`` keeps the current timeout."""

    def _apply(handler_config: HandlerConfig) -> HandlerConfig:
        if timeout is None:
            return handler_config
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        return dataclasses.replace(handler_config, timeout=timeout)

    return _apply


def build_config(*options: Option, defaults: HandlerConfig = None) -> HandlerConfig:
    handler_config = defaults or HandlerConfig()
    for option in options:
        handler_config = option(handler_config)
    LOG.debug("Created handler config %s", handler_config)
    return handler_config
