import io
import json
import socket
from typing import Callable, List, Optional

import pytest
from werkzeug import Request, Response

from customresource.http.client import HttpClient
from customresource.http.request import get_raw_url
from customresource.models import LifecycleRequest, RequestType, encode_request


class FunctionTransport(HttpClient):
    """An HttpClient that hands every request to a function instead of sending it."""

    def __init__(self, fn: Callable[[Request], Response]):
        self.fn = fn
        self.requests: List[Request] = []
        self.timeouts: List[Optional[float]] = []

    def request(self, request: Request, timeout: float = None) -> Response:
        self.requests.append(request)
        self.timeouts.append(timeout)
        return self.fn(request)

    @property
    def reports(self) -> List[dict]:
        """The JSON bodies of all requests made through this transport."""
        return [json.loads(request.get_data()) for request in self.requests]

    @property
    def urls(self) -> List[str]:
        return [get_raw_url(request) for request in self.requests]


@pytest.fixture
def transport() -> FunctionTransport:
    """A transport that answers every status report with ``200 OK``."""
    return FunctionTransport(lambda _: Response(status=200))


@pytest.fixture
def failing_transport() -> FunctionTransport:
    def _fail(_):
        raise ConnectionRefusedError("connection refused")

    return FunctionTransport(_fail)


@pytest.fixture
def output() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def lifecycle_request() -> LifecycleRequest:
    return LifecycleRequest(
        request_type=RequestType.CREATE,
        response_url="http://localhost/response",
        stack_id="arn:aws:cloudformation:us-east-1:000000000000:stack/my-stack/1234",
        request_id="e4c5e3e6-5ee1-4c3b-9d56-5e3d1b0c9a10",
        resource_type="Custom::Bucket",
        logical_resource_id="Resource",
        resource_properties={"ServiceToken": "arn:aws:lambda:us-east-1:000000000000:function:fn"},
    )


@pytest.fixture
def lifecycle_event(lifecycle_request) -> bytes:
    return encode_request(lifecycle_request)


@pytest.fixture
def closed_port() -> int:
    """A local TCP port nothing is listening on."""
    tcp = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    tcp.bind(("127.0.0.1", 0))
    port = tcp.getsockname()[1]
    tcp.close()
    return port


@pytest.fixture
def make_transport() -> Callable[[Callable[[Request], Response]], FunctionTransport]:
    return FunctionTransport
