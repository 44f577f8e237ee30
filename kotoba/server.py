import logging
from functools import partial
from typing import Optional

from aiohttp import web
from hiku.graph import Graph

from kotoba.config import Config
from kotoba.endpoint import BadRequest, GraphQLDispatcher, read_body
from kotoba.endpoint import read_query_string
from kotoba.graph import MUTATION_GRAPH, QUERY_GRAPH, build_schema
from kotoba.ide import IDEPage
from kotoba.state import AppState, StateProvider


log = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", Config)
STATE_KEY = web.AppKey("state", AppState)
GRAPHS_KEY = web.AppKey("graphs", tuple)
DISPATCHER_KEY = web.AppKey("dispatcher", GraphQLDispatcher)
IDE_KEY = web.AppKey("ide", IDEPage)


def _bad_request(message: str) -> web.Response:
    log.info("Bad request: %s", message)
    return web.Response(status=400, text=message + "\n")


async def _respond(request: web.Request, data) -> web.Response:
    app = request.app
    result = await app[DISPATCHER_KEY].execute(data, app[STATE_KEY])
    return web.json_response(result)


async def handle_index(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    return web.json_response({"name": config.name, "ok": True})


async def handle_query_get(request: web.Request) -> web.Response:
    try:
        data = read_query_string(request.rel_url.raw_query_string)
    except BadRequest as e:
        return _bad_request(e.message)
    return await _respond(request, data)


async def handle_query_post(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    if (request.content_length or 0) > config.max_body_size:
        return _bad_request("Payload is too big")
    try:
        body = await request.read()
    except web.HTTPRequestEntityTooLarge:
        return _bad_request("Payload is too big")
    try:
        data = read_body(request.content_type, body, config.batching)
    except BadRequest as e:
        return _bad_request(e.message)
    return await _respond(request, data)


async def handle_ide(request: web.Request) -> web.Response:
    return web.Response(
        text=request.app[IDE_KEY].content, content_type="text/html"
    )


async def init_dispatcher(app: web.Application) -> None:
    # executor must be created in the loop which serves requests
    config = app[CONFIG_KEY]
    query_graph, mutation_graph = app[GRAPHS_KEY]
    app[DISPATCHER_KEY] = GraphQLDispatcher(
        build_schema(
            query_graph,
            mutation_graph,
            introspection=config.introspection,
        ),
        batching=config.batching,
        timeout=config.execution_timeout,
        debug=config.debug,
    )
    log.debug("GraphQL schema is ready")


def create_app(
    config: Config,
    state: Optional[AppState] = None,
    query_graph: Graph = QUERY_GRAPH,
    mutation_graph: Optional[Graph] = MUTATION_GRAPH,
) -> web.Application:
    """Creates the HTTP application

    Application state is initialized here when not provided, so a failure
    to initialize it prevents the server from starting. The schema is
    built from the graphs on application startup.

    :param config: :py:class:`kotoba.config.Config`
    :param state: shared :py:class:`kotoba.state.AppState`
    :param query_graph: query graph, the default one when not provided
    :param mutation_graph: mutation graph, the default one when not provided
    :raises kotoba.state.StateInitError: when state can not be initialized
    """
    if state is None:
        state = StateProvider(partial(AppState.from_config, config)).get()

    app = web.Application(client_max_size=config.max_body_size)
    app[CONFIG_KEY] = config
    app[STATE_KEY] = state
    app[GRAPHS_KEY] = (query_graph, mutation_graph)
    app[IDE_KEY] = IDEPage(config.query_path, config.name)
    app.on_startup.append(init_dispatcher)
    app.add_routes(
        [
            web.get("/", handle_index),
            web.get(config.query_path, handle_query_get),
            web.post(config.query_path, handle_query_post),
            web.get(config.ide_path, handle_ide),
        ]
    )
    return app
