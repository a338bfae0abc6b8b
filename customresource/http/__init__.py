from .client import HttpClient, SimpleRequestsClient
from .request import create_request, get_raw_url

__all__ = ["HttpClient", "SimpleRequestsClient", "create_request", "get_raw_url"]
