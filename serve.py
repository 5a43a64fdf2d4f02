import asyncio
import logging
import os
from collections.abc import Awaitable, Callable

from entitystore.accessor import CollectionAccessor
from entitystore.config import Config, build_store
from entitystore.models.exceptions import EntityStoreError
from entitystore.models.query import Page
from http_server.request import Request
from http_server.response import Response, error_response, response
from http_server.server import HTTPServer

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 1000


async def main():
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    config = Config.from_env()
    accessor = CollectionAccessor(build_store(config))
    logger.info(f"Using {config.backend} backend")

    server = HTTPServer(host=config.host, port=config.port)
    await register_routes(server, accessor, page_size=config.page_size)
    logger.debug(f"Registered routes: {[(r.method, r.template) for r in server.routes]}")
    await server.start()


def _page_payload(page: Page) -> dict:
    return {"items": page.entities, "next_page_token": page.next_cursor}


def _store_error(e: EntityStoreError) -> Response:
    status = e.code if isinstance(e.code, int) and 400 <= e.code <= 599 else 500
    return response(status_code=status).json({"error": e.to_dict()})


def _bad_request(message: str) -> Response:
    return error_response(400, 400, message)


def _limit(request: Request, default: int) -> int:
    raw = request.param("limit")
    if raw is None or raw == "":
        return default
    try:
        limit = int(raw, 10)
    except ValueError:
        raise ValueError(f"'limit' must be an integer, got {raw!r}") from None
    if limit <= 0 or limit > MAX_PAGE_SIZE:
        raise ValueError(f"'limit' must be between 1 and {MAX_PAGE_SIZE}")
    return limit


def _body(request: Request) -> dict:
    data = request.json
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def api(handler: Callable[[Request], Awaitable[Response]]):
    """Translate accessor errors and bad input into JSON error responses."""

    async def wrapper(request: Request) -> Response:
        try:
            return await handler(request)
        except EntityStoreError as e:
            return _store_error(e)
        except ValueError as e:
            return _bad_request(str(e))

    wrapper.__name__ = handler.__name__
    return wrapper


async def register_routes(server: HTTPServer, accessor: CollectionAccessor, page_size: int = 10):

    @server.route('/admins', ['GET'])
    @api
    async def list_admins(request: Request) -> Response:
        page = await accessor.list_admins(_limit(request, page_size), request.param("cursor"))
        return response(status_code=200).json(_page_payload(page))

    @server.route('/games', ['GET'])
    @api
    async def list_games(request: Request) -> Response:
        page = await accessor.list_games(_limit(request, page_size), request.param("cursor"))
        return response(status_code=200).json(_page_payload(page))

    @server.route('/tournaments', ['GET'])
    @api
    async def list_tournaments(request: Request) -> Response:
        page = await accessor.list_tournaments(_limit(request, page_size), request.param("cursor"))
        return response(status_code=200).json(_page_payload(page))

    @server.route('/tournaments/{id}', ['GET'])
    @api
    async def read_tournament(request: Request) -> Response:
        entity = await accessor.read_tournament(request.param("id"))
        return response(status_code=200).json(entity)

    @server.route('/kinds/{kind}', ['GET'])
    @api
    async def list_kind(request: Request) -> Response:
        order = request.param("order")
        if not order:
            return _bad_request("Missing 'order' parameter")

        page = await accessor.list(
            request.param("kind"), order, _limit(request, page_size), request.param("cursor")
        )
        return response(status_code=200).json(_page_payload(page))

    @server.route('/kinds/{kind}', ['POST'])
    @api
    async def create(request: Request) -> Response:
        entity = await accessor.create(request.param("kind"), _body(request))
        return response(status_code=201).json(entity)

    @server.route('/kinds/{kind}/{id}', ['GET'])
    @api
    async def read(request: Request) -> Response:
        entity = await accessor.read(request.param("kind"), request.param("id"))
        return response(status_code=200).json(entity)

    @server.route('/kinds/{kind}/{id}', ['PUT'])
    @api
    async def update(request: Request) -> Response:
        entity = await accessor.update(
            request.param("kind"), request.param("id"), _body(request)
        )
        return response(status_code=200).json(entity)

    @server.route('/kinds/{kind}/{id}', ['DELETE'])
    @api
    async def delete(request: Request) -> Response:
        await accessor.delete(request.param("kind"), request.param("id"))
        return response(status_code=200).json({"success": True})


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
