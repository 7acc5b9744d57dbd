"""HTTP request and response types handed to middleware."""

from parvus.http.request import Request
from parvus.http.response import ServerResponse

__all__ = ["Request", "ServerResponse"]
