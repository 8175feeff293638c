"""
GraphQL endpoint for kindql.

Handlers are synchronous: FastAPI runs each request on its own worker
thread, which is the concurrency model the record store is built for.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from kindql.app.dependencies import get_schema_resolver, get_store
from kindql.runtime import SchemaResolver
from kindql.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["graphql"])

GRAPHQL_PATH = "/graphql"

# GraphiQL IDE served from a CDN; the endpoint URL is substituted at request time
GRAPHIQL_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>kindql GraphiQL</title>
    <link rel="stylesheet" href="https://unpkg.com/graphiql@3/graphiql.min.css" />
    <style>body { margin: 0; height: 100vh; } #graphiql { height: 100vh; }</style>
  </head>
  <body>
    <div id="graphiql">Loading...</div>
    <script crossorigin src="https://unpkg.com/react@18/umd/react.production.min.js"></script>
    <script crossorigin src="https://unpkg.com/react-dom@18/umd/react-dom.production.min.js"></script>
    <script crossorigin src="https://unpkg.com/graphiql@3/graphiql.min.js"></script>
    <script>
      const fetcher = GraphiQL.createFetcher({ url: __ENDPOINT__ });
      ReactDOM.createRoot(document.getElementById("graphiql")).render(
        React.createElement(GraphiQL, { fetcher: fetcher })
      );
    </script>
  </body>
</html>
"""


def render_graphiql(endpoint: str = GRAPHQL_PATH) -> str:
    return GRAPHIQL_TEMPLATE.replace("__ENDPOINT__", json.dumps(endpoint))


class GraphQLRequest(BaseModel):
    """GraphQL-over-HTTP request body."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., description="GraphQL document")
    variables: dict[str, Any] | None = Field(default=None, description="Variable values")
    operation_name: str | None = Field(
        default=None,
        alias="operationName",
        description="Operation to run when the document has several",
    )


@router.post(GRAPHQL_PATH)
def execute_query(
    request: GraphQLRequest,
    resolver: SchemaResolver = Depends(get_schema_resolver),
    store: RecordStore = Depends(get_store),
) -> dict[str, Any]:
    """Execute a GraphQL query posted as JSON."""
    result = resolver.execute(request.query, store, request.variables, request.operation_name)
    return result.formatted


@router.get(GRAPHQL_PATH)
def execute_query_get(
    query: str,
    variables: str | None = None,
    operationName: str | None = None,
    resolver: SchemaResolver = Depends(get_schema_resolver),
    store: RecordStore = Depends(get_store),
) -> dict[str, Any]:
    """Execute a GraphQL query passed as URL parameters."""
    parsed_variables = None
    if variables:
        try:
            parsed_variables = json.loads(variables)
        except json.JSONDecodeError as e:
            raise HTTPException(status_code=400, detail=f"Invalid variables JSON: {e}")
        if parsed_variables is not None and not isinstance(parsed_variables, dict):
            raise HTTPException(status_code=400, detail="Variables must be a JSON object")

    result = resolver.execute(query, store, parsed_variables, operationName)
    return result.formatted


@router.get("/schema", response_class=PlainTextResponse)
def get_schema_sdl(resolver: SchemaResolver = Depends(get_schema_resolver)) -> str:
    """Current schema in GraphQL SDL."""
    return resolver.resolve_schema().sdl()


@router.get("/graphiql", response_class=HTMLResponse)
def graphiql() -> str:
    """GraphiQL IDE pointed at the GraphQL endpoint."""
    return render_graphiql()
