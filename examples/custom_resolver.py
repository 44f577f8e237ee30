import logging
from datetime import datetime, timezone

from aiohttp import web

from hiku.engine import pass_context
from hiku.graph import Field, Graph, Root
from hiku.types import Float

from kotoba.config import load_config
from kotoba.graph import MUTATION_GRAPH, QUERY_GRAPH
from kotoba.server import create_app


log = logging.getLogger(__name__)


@pass_context
async def uptime(ctx, fields):
    started_at = ctx["app"].started_at
    seconds = (datetime.now(timezone.utc) - started_at).total_seconds()
    return [seconds for _ in fields]


EXTRA = Root([Field("uptime", Float, uptime)])

QUERY = Graph(QUERY_GRAPH.nodes + [QUERY_GRAPH.root, EXTRA])

MUTATION = Graph(
    QUERY.nodes + [MUTATION_GRAPH.root]
)


def main():
    logging.basicConfig(level=logging.INFO)
    config = load_config()
    app = create_app(config, query_graph=QUERY, mutation_graph=MUTATION)
    log.info("GraphiQL is available on http://localhost:%s%s",
             config.port, config.ide_path)
    web.run_app(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
