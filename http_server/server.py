import asyncio
import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional
from urllib.parse import parse_qs, unquote, urlparse

from .request import Request
from .response import Response

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Awaitable[object]]

MAX_BODY_BYTES = 10 * 1024 * 1024

STATUS_MESSAGES = {
    200: 'OK',
    201: 'Created',
    204: 'No Content',
    400: 'Bad Request',
    401: 'Unauthorized',
    403: 'Forbidden',
    404: 'Not Found',
    405: 'Method Not Allowed',
    408: 'Request Timeout',
    409: 'Conflict',
    410: 'Gone',
    412: 'Precondition Failed',
    413: 'Payload Too Large',
    422: 'Unprocessable Entity',
    429: 'Too Many Requests',
    499: 'Client Closed Request',
    500: 'Internal Server Error',
    501: 'Not Implemented',
    502: 'Bad Gateway',
    503: 'Service Unavailable',
    504: 'Gateway Timeout',
}

_PARAM_RE = re.compile(r'\{([A-Za-z_][A-Za-z0-9_]*)\}')


@dataclass
class Route:
    """A path template such as /kinds/{kind}/{id} bound to a handler."""

    method: str
    template: str
    handler: Handler

    def __post_init__(self):
        pattern = ''
        last = 0
        for match in _PARAM_RE.finditer(self.template):
            pattern += re.escape(self.template[last:match.start()])
            pattern += f'(?P<{match.group(1)}>[^/]+)'
            last = match.end()
        pattern += re.escape(self.template[last:])
        self._regex = re.compile(f'^{pattern}$')
        self.is_static = last == 0

    def match(self, path: str) -> Optional[dict[str, str]]:
        found = self._regex.match(path)
        if found is None:
            return None
        return {name: unquote(value) for name, value in found.groupdict().items()}


class HTTPServer:
    def __init__(self, host: str = '0.0.0.0', port: int = 8080):
        self.host = host
        self.port = port
        self.routes: list[Route] = []

    def route(self, path: str, methods: Optional[list[str]] = None):
        """Decorator for registering route handlers. {name} segments bind path params."""
        if methods is None:
            methods = ['GET']

        def decorator(handler: Handler) -> Handler:
            for method in methods:
                self.routes.append(Route(method.upper(), path, handler))
            # Static paths win over templated ones
            self.routes.sort(key=lambda r: not r.is_static)
            return handler
        return decorator

    def resolve(self, method: str, path: str) -> tuple[Optional[Handler], dict[str, str], bool]:
        """
        Find the handler for a request.

        Returns:
            (handler, path_params, path_known). path_known is True when some
            route matches the path under a different method.
        """
        path_known = False
        for route in self.routes:
            params = route.match(path)
            if params is None:
                continue
            if route.method == method:
                return route.handler, params, True
            path_known = True
        return None, {}, path_known

    async def parse_request(self, reader: asyncio.StreamReader) -> Optional[Request]:
        """Parse HTTP request with timeout and size limits"""
        try:
            request_line = await asyncio.wait_for(reader.readline(), timeout=5.0)
            if not request_line:
                return None

            method, full_path, version = request_line.decode('utf-8').strip().split(' ', 2)

            parsed_url = urlparse(full_path)
            query_params = parse_qs(parsed_url.query)

            headers = {}
            while True:
                line = await asyncio.wait_for(reader.readline(), timeout=5.0)
                if line in (b'\r\n', b'\n', b''):
                    break

                header_line = line.decode('utf-8').strip()
                if ':' in header_line:
                    key, value = header_line.split(':', 1)
                    headers[key.strip().lower()] = value.strip()

            body = b''
            content_length = int(headers.get('content-length', 0))
            if content_length > 0:
                if content_length > MAX_BODY_BYTES:
                    raise ValueError("Request body too large")

                body = await asyncio.wait_for(
                    reader.readexactly(content_length),
                    timeout=30.0
                )

            return Request(
                method=method.upper(),
                path=parsed_url.path,
                headers=headers,
                query_params=query_params,
                body=body,
                version=version
            )

        except asyncio.TimeoutError:
            return None
        except (ValueError, UnicodeDecodeError, asyncio.IncompleteReadError) as e:
            logger.error(f"Error parsing request: {e}")
            return None

    def build_response(self, response: Response) -> bytes:
        """Build HTTP response bytes"""
        status_text = STATUS_MESSAGES.get(response.status, 'Unknown')

        headers = dict(response.headers)
        headers.setdefault('content-type', 'text/plain')
        headers['content-length'] = str(len(response.body))
        headers['connection'] = 'keep-alive'
        headers['server'] = 'EntityStoreHttp/1.0'

        response_line = f"HTTP/1.1 {response.status} {status_text}\r\n"
        header_lines = ''.join(f"{key}: {value}\r\n" for key, value in headers.items())

        return response_line.encode() + header_lines.encode() + b'\r\n' + response.body

    async def handle_request(self, request: Request) -> Response:
        """Route request to appropriate handler"""
        handler, params, path_known = self.resolve(request.method, request.path)

        if handler is None:
            if path_known:
                return Response(status=405, body=b'Method Not Allowed')
            return Response(status=404, body=b'Route Not Found')

        request.path_params = params

        try:
            result = await handler(request)
        except Exception as e:
            logger.exception(f"Handler error for {request.method} {request.path}: {e}")
            return Response(status=500, body=b'Internal Server Error')

        if isinstance(result, Response):
            return result
        if isinstance(result, (dict, list)):
            return Response(
                status=200,
                headers={'content-type': 'application/json'},
                body=json.dumps(result, default=str).encode()
            )
        if isinstance(result, str):
            return Response(status=200, body=result.encode())
        if isinstance(result, bytes):
            return Response(status=200, body=result)

        logger.error(f"Handler for {request.path} returned {type(result).__name__}")
        return Response(status=500, body=b'Internal Server Error')

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle a single client connection with keep-alive"""
        peer = writer.get_extra_info('peername')

        try:
            while True:
                request = await self.parse_request(reader)
                if request is None:
                    break

                start_time = time.perf_counter()
                logger.debug(f"--> {request.method} {request.path}")

                response = await self.handle_request(request)
                writer.write(self.build_response(response))
                await writer.drain()

                elapsed_ms = (time.perf_counter() - start_time) * 1000
                logger.debug(
                    f"<-- {response.status} - {len(response.body)} bytes - {elapsed_ms:.2f}ms"
                )

                if request.headers.get('connection', '').lower() == 'close':
                    break

        except ConnectionResetError:
            pass
        except OSError as e:
            logger.error(f"Connection error from {peer}: {e}")
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass

    async def start(self):
        """Start the HTTP server"""
        server = await asyncio.start_server(self.handle_client, self.host, self.port)

        addr = server.sockets[0].getsockname()
        logger.info(f'Entity store HTTP server running on http://{addr[0]}:{addr[1]}')

        try:
            async with server:
                await server.serve_forever()
        except asyncio.CancelledError:
            logger.info("Server shutdown requested")
        finally:
            await self.shutdown(server)

    async def shutdown(self, server):
        """Gracefully shutdown the server"""
        logger.info("Shutting down server...")
        server.close()
        await server.wait_closed()
        logger.info("Server shutdown complete")
