"""
Minimal asyncio HTTP/1.1 server with JSON helpers and path-param routing.
"""

from http_server.request import Request
from http_server.response import Response, error_response, response
from http_server.server import HTTPServer

__all__ = ["HTTPServer", "Request", "Response", "response", "error_response"]
