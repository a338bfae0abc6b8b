import abc
from typing import Optional

import requests
from werkzeug import Request, Response
from werkzeug.datastructures import Headers

from customresource import config
from customresource.http.request import get_raw_url

FRAMING_HEADERS = ("content-length", "transfer-encoding", "content-encoding")


class HttpClient(abc.ABC):
    """
    Executes a sans-IO werkzeug ``Request`` and returns the werkzeug ``Response``. This is the transport the status
    reports are delivered with, and can be replaced per handler with ``with_transport``.
    """

    @abc.abstractmethod
    def request(self, request: Request, timeout: Optional[float] = None) -> Response:
        """
        Sends the request to the host of its URL.

        :param request: the request to send
        :param timeout: the maximum time in seconds to wait for the server, or None to wait indefinitely
        :return: the complete response
        """

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class _VerifyRespectingSession(requests.Session):
    """
    Works around https://github.com/psf/requests/issues/3829: with ``REQUESTS_CA_BUNDLE`` or ``CURL_CA_BUNDLE`` set,
    requests would verify TLS even though ``session.verify`` is ``False``.
    """

    def merge_environment_settings(self, url, proxies, stream, verify, *args, **kwargs):
        if self.verify is False:
            verify = False
        return super().merge_environment_settings(url, proxies, stream, verify, *args, **kwargs)


class SimpleRequestsClient(HttpClient):
    """An HttpClient backed by a requests session. Redirects are not followed."""

    session: requests.Session

    def __init__(self, session: requests.Session = None):
        self.session = session or _VerifyRespectingSession()
        if session is None:
            self.session.verify = config.CALLBACK_TLS_VERIFY

    def request(self, request: Request, timeout: Optional[float] = None) -> Response:
        headers = dict(request.headers.items())
        # requests sets the host from the URL
        headers.pop("Host", None)
        # keep the body untouched by urllib3, which would otherwise ask for gzip
        headers.setdefault("Accept-Encoding", "identity")

        response = self.session.request(
            method=request.method,
            url=get_raw_url(request),
            headers=headers,
            data=request.get_data(),
            timeout=timeout,
            allow_redirects=False,
        )

        # the body is already decoded and complete, werkzeug sets the framing headers again
        headers = Headers(
            [(k, v) for k, v in response.headers.items() if k.lower() not in FRAMING_HEADERS]
        )
        return Response(response.content, status=response.status_code, headers=headers)

    def close(self):
        self.session.close()
