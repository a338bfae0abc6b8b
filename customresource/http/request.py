from io import BytesIO
from typing import Mapping, Union
from urllib.parse import unquote, urlsplit

from werkzeug.datastructures import Headers
from werkzeug.wrappers.request import Request

from customresource import config

DEFAULT_PORTS = {"http": 80, "https": 443}


def _environ_header_name(name: str) -> str:
    name = name.upper().replace("-", "_")
    if name in ("CONTENT_TYPE", "CONTENT_LENGTH"):
        return name
    return f"HTTP_{name}"


def create_request(
    method: str,
    url: str,
    headers: Union[Mapping, Headers] = None,
    body: Union[bytes, str] = None,
) -> Request:
    """
    Creates a sans-IO werkzeug ``Request`` for the given absolute URL. The path and query string keep their original
    encoding (the signature of a pre-signed URL covers the exact query string), and can be read back with
    ``get_raw_url``.

    :param method: the HTTP method
    :param url: the absolute URL (scheme and host are required)
    :param headers: optional HTTP headers, a ``Host`` header is derived from the URL if missing
    :param body: optional request body
    :return: the request
    :raises ValueError: if the URL is not an absolute http(s) URL
    """
    parts = urlsplit(url)
    if parts.scheme not in DEFAULT_PORTS or not parts.hostname:
        raise ValueError(f"invalid URL {url!r}: expected an absolute http(s) URL")

    if isinstance(body, str):
        body = body.encode(config.DEFAULT_ENCODING)
    data = body or b""

    raw_path = parts.path or "/"
    raw_uri = f"{raw_path}?{parts.query}" if parts.query else raw_path

    environ = {
        "REQUEST_METHOD": method,
        "SCRIPT_NAME": "",
        # WSGI expects the decoded path as latin-1 string
        "PATH_INFO": unquote(raw_path, encoding="latin-1"),
        "QUERY_STRING": parts.query,
        "RAW_URI": raw_uri,
        "REQUEST_URI": raw_uri,
        "SERVER_NAME": parts.hostname,
        "SERVER_PORT": str(parts.port or DEFAULT_PORTS[parts.scheme]),
        "SERVER_PROTOCOL": "HTTP/1.1",
        "CONTENT_LENGTH": str(len(data)),
        "wsgi.version": (1, 0),
        "wsgi.url_scheme": parts.scheme,
        "wsgi.input": BytesIO(data),
        "wsgi.errors": BytesIO(),
        "wsgi.multithread": True,
        "wsgi.multiprocess": False,
        "wsgi.run_once": False,
    }

    headers = Headers(headers)
    if "Host" not in headers:
        headers["Host"] = parts.netloc.rpartition("@")[2]
    for name, value in headers.items():
        environ[_environ_header_name(name)] = value

    return Request(environ)


def get_raw_url(request: Request) -> str:
    """Returns the URL of a request made with ``create_request``, in the encoding it was created with."""
    return f"{request.scheme}://{request.host}{request.environ['RAW_URI']}"
