from typing import List, Optional

from hiku.engine import Context, pass_context
from hiku.executors.asyncio import AsyncIOExecutor
from hiku.graph import Field, Graph, Root
from hiku.query import Field as QueryField
from hiku.schema import Schema
from hiku.types import Integer, String

from kotoba.context import APP_KEY


NO_OP_RESULT = 42


@pass_context
async def app_name(ctx: Context, fields: List[QueryField]) -> List[str]:
    return [ctx[APP_KEY].name for _ in fields]


async def no_op(fields: List[QueryField]) -> List[int]:
    return [NO_OP_RESULT for _ in fields]


QUERY_GRAPH = Graph(
    [
        Root(
            [
                Field("app", String, app_name, description="Server name"),
            ]
        ),
    ]
)

MUTATION_GRAPH = Graph(
    QUERY_GRAPH.nodes
    + [
        Root(
            [
                Field("noOp", Integer, no_op, description="Does nothing"),
            ]
        ),
    ]
)


def build_schema(
    query_graph: Graph = QUERY_GRAPH,
    mutation_graph: Optional[Graph] = MUTATION_GRAPH,
    introspection: bool = True,
) -> Schema:
    """Builds the root schema shared by all requests

    Subscriptions are not supported, the engine rejects them with
    a GraphQL error.
    """
    return Schema(
        AsyncIOExecutor(),
        query_graph,
        mutation=mutation_graph,
        introspection=introspection,
    )
