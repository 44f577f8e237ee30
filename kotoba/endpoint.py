import json
import asyncio
import logging
from typing import Any, List, Optional, Union
from urllib.parse import parse_qsl

from graphql import GraphQLError as DocumentError
from hiku.endpoint.graphql import (
    BaseAsyncGraphQLEndpoint,
    GraphQLRequest,
    GraphQLResponse,
)
from hiku.schema import Schema

from kotoba.context import ExecutionContext
from kotoba.state import AppState


log = logging.getLogger(__name__)

GRAPHQL_CONTENT_TYPE = "application/graphql"


class BadRequest(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _read_request(data: Any) -> GraphQLRequest:
    if not isinstance(data, dict):
        raise BadRequest("Request must be a JSON object")

    query = data.get("query")
    if not isinstance(query, str) or not query:
        raise BadRequest("Missing query")
    request: GraphQLRequest = {"query": query}

    variables = data.get("variables")
    if variables is not None:
        if not isinstance(variables, dict):
            raise BadRequest("Variables must be a JSON object")
        request["variables"] = variables

    operation_name = data.get("operationName")
    if operation_name is not None:
        if not isinstance(operation_name, str):
            raise BadRequest("Operation name must be a string")
        request["operationName"] = operation_name

    return request


def read_query_string(raw: str) -> GraphQLRequest:
    """Reads GraphQL request from the URL query string

    Recognized parameters are ``query``, ``operationName`` and JSON-encoded
    ``variables``. Empty parameters are treated as missing.

    :param str raw: percent-encoded query string
    :raises BadRequest: when the query string can not be decoded or
                        ``query`` parameter is missing
    """
    try:
        params = dict(parse_qsl(raw, keep_blank_values=True, errors="strict"))
    except (UnicodeDecodeError, ValueError) as e:
        raise BadRequest("Malformed query string: {}".format(e))

    data: dict = {"query": params.get("query")}
    if params.get("operationName"):
        data["operationName"] = params["operationName"]
    if params.get("variables"):
        try:
            data["variables"] = json.loads(params["variables"])
        except ValueError:
            raise BadRequest("Variables are not valid JSON")
    return _read_request(data)


def read_body(
    content_type: str,
    body: bytes,
    batching: bool = False,
) -> Union[GraphQLRequest, List[GraphQLRequest]]:
    """Reads GraphQL request from the POST body

    ``application/graphql`` body is the query document itself, any other
    body is expected to be JSON.

    :param str content_type: request content type, without parameters
    :param bytes body: raw request body
    :param bool batching: accept a JSON list of requests
    :raises BadRequest: on malformed body
    """
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        raise BadRequest("Request body is not valid UTF-8")

    if content_type == GRAPHQL_CONTENT_TYPE:
        return _read_request({"query": text})

    try:
        data = json.loads(text)
    except ValueError as e:
        raise BadRequest("Invalid JSON: {}".format(e))

    if isinstance(data, list):
        if not batching:
            raise BadRequest("Batching is not supported")
        return [_read_request(item) for item in data]
    return _read_request(data)


class GraphQLDispatcher(BaseAsyncGraphQLEndpoint):
    """Executes decoded GraphQL requests against the schema

    Every operation gets its own :py:class:`ExecutionContext`. Failures
    inside a valid request are reported in the ``errors`` list of the
    response, they never escape as exceptions.

    Handlers call :py:meth:`execute` with the shared state, inherited
    ``dispatch`` runs one operation with an already built context.
    """

    def __init__(
        self,
        schema: Schema,
        batching: bool = False,
        timeout: Optional[float] = None,
        debug: bool = False,
    ):
        super().__init__(schema, batching=batching)
        self.timeout = timeout
        self.debug = debug

    def _error(self, message: str) -> GraphQLResponse:
        return {"data": None, "errors": [{"message": message}]}

    async def _execute(
        self, data: GraphQLRequest, app: AppState
    ) -> GraphQLResponse:
        context = ExecutionContext(app)
        try:
            return await asyncio.wait_for(
                self.dispatch(data, context), self.timeout
            )
        except DocumentError as e:
            return {"data": None, "errors": [e.formatted]}  # type: ignore
        except asyncio.TimeoutError:
            log.warning(
                "Operation %r timed out after %ss",
                data.get("operationName"),
                self.timeout,
            )
            return self._error("Query execution timed out")
        except (AssertionError, KeyError) as e:
            # raised by the engine for queries it can not read
            log.info("Failed to read query: %r", e, exc_info=True)
            return self._error("Failed to read query: {!r}".format(e))
        except Exception as e:
            log.exception("Failed to execute query")
            if self.debug:
                return self._error(repr(e))
            return self._error("Internal server error")

    async def execute(
        self,
        data: Union[GraphQLRequest, List[GraphQLRequest]],
        app: AppState,
    ) -> Union[GraphQLResponse, List[GraphQLResponse]]:
        """Executes single or batched request

        Example:

        .. code-block:: python

            result = await dispatcher.execute({"query": "{ app }"}, state)

        :param data: request or list of requests
        :param app: shared application state
        """
        if isinstance(data, list):
            return list(
                await asyncio.gather(
                    *(self._execute(item, app) for item in data)
                )
            )
        return await self._execute(data, app)
