# mcp-farm/packages/mcp_graphql/mcp_graphql/server.py
# server.py: GraphQL MCP (FastMCP, stdio)
# - AppCtx (token cache, transport, schema cache) lives for the server lifetime
# - Tool argument names are the camelCase names MCP clients send

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, Literal, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from . import handlers
from .config import GraphQLConfig, SERVICE_NAME
from .context import AppCtx, build_context
from .errors import ConfigError, GraphQLMcpError
from .logging_setup import configure_logging

logger = logging.getLogger(__name__)


# ------------------------- App-wide state -------------------------

APP: Optional[AppCtx] = None  # set/unset in lifespan


@asynccontextmanager
async def lifespan(server: FastMCP):
    """Build the context and try to pre-fetch the schema; a failed pre-fetch is retried on demand."""
    global APP
    APP = build_context(GraphQLConfig())
    try:
        logger.info("Pre-fetching GraphQL schema...")
        APP.schema.get()
    except GraphQLMcpError as e:
        logger.error("Failed to pre-fetch schema, will try again when needed", extra={"meta": {"error": str(e)}})
        logger.warning("This may be an authentication issue. Please verify CLIENT_ID, CLIENT_SECRET "
                       "and AUTH_URL in your .env file.")
    except Exception as e:
        logger.error("Unexpected error while pre-fetching schema, will try again when needed",
                     extra={"meta": {"error": str(e)}}, exc_info=True)
    try:
        yield APP
    finally:
        APP = None


mcp = FastMCP(SERVICE_NAME, lifespan=lifespan)


def _ctx() -> AppCtx:
    assert APP is not None
    return APP


# ------------------------------ TOOLS ------------------------------

@mcp.tool(name="execute-query", description="Execute a GraphQL query against the GraphQL API")
def execute_query(
    query: str = Field(description="The GraphQL query to execute"),
    variables: Optional[Dict[str, Any]] = Field(default=None, description="Variables for the GraphQL query"),
    validateOnly: bool = Field(default=False, description="If true, only validate the query without executing it"),
) -> str:
    return handlers.execute_query(_ctx(), query, variables, validateOnly)


@mcp.tool(name="get-schema", description="Get information about the GraphQL schema")
def get_schema(
    typeName: Optional[str] = Field(default=None, description="Filter schema by specific type name"),
    fieldName: Optional[str] = Field(default=None, description="Filter schema by specific field name"),
    includeQueries: bool = Field(default=True, description="Include query definitions"),
    includeMutations: bool = Field(default=True, description="Include mutation definitions"),
) -> str:
    return handlers.get_schema(_ctx(), typeName, fieldName, includeQueries, includeMutations)


@mcp.tool(name="list-queries", description="List all available GraphQL queries in the API")
def list_queries(
    search: Optional[str] = Field(default=None, description="Search for specific queries by name"),
    generateExample: bool = Field(default=False, description="Generate example usage for found queries"),
    limit: int = Field(default=50, description="Maximum number of queries to return"),
) -> str:
    return handlers.list_queries(_ctx(), search, generateExample, limit)


@mcp.tool(name="list-mutations", description="List all available GraphQL mutations in the API")
def list_mutations(
    search: Optional[str] = Field(default=None, description="Search for specific mutations by name"),
    generateExample: bool = Field(default=False, description="Generate example usage for found mutations"),
    limit: int = Field(default=50, description="Maximum number of mutations to return"),
) -> str:
    return handlers.list_mutations(_ctx(), search, generateExample, limit)


@mcp.tool(name="type-details", description="Get detailed information about a GraphQL type")
def type_details(
    typeName: str = Field(description="Name of the GraphQL type to get details for"),
) -> str:
    return handlers.type_details(_ctx(), typeName)


@mcp.tool(name="generate-query",
          description="Generate a GraphQL query or mutation template with variables based on operation name")
def generate_query(
    operationName: str = Field(description='Name of the query or mutation to generate (e.g., "getCustomerOrder")'),
    operationType: Literal["query", "mutation"] = Field(description="Type of operation to generate"),
) -> str:
    return handlers.generate_query(_ctx(), operationName, operationType)


@mcp.tool(name="check-heartbeat",
          description="Check if the GraphQL server is alive and responding to heartbeat requests")
def check_heartbeat() -> str:
    return handlers.check_heartbeat(_ctx())


@mcp.tool(name="refresh-schema", description="Re-fetch the GraphQL schema and replace the cached copy")
def refresh_schema() -> str:
    return handlers.refresh_schema(_ctx())


@mcp.tool(name="get-deal-with-funding-nodes",
          description="Get detailed information about a deal including its associated funding nodes")
def get_deal_with_funding_nodes(
    dealId: Optional[str] = Field(default=None, description="Optional business interaction ID of the deal to retrieve"),
    limit: int = Field(default=5, description="Maximum number of deals to return when no deal ID is provided"),
) -> str:
    return handlers.deal_with_funding_nodes(_ctx(), dealId, limit)


@mcp.tool(name="get-order-author-details",
          description="Get detailed information about authors associated with a specific order")
def get_order_author_details(
    orderBiId: str = Field(description="The business interaction ID of the order (e.g., 3202523)"),
) -> str:
    return handlers.order_author_details(_ctx(), orderBiId)


@mcp.tool(name="get-customer-order", description="Get detailed information about a customer order")
def get_customer_order(
    biId: str = Field(description="Business interaction ID of the customer order to retrieve"),
) -> str:
    return handlers.customer_order(_ctx(), biId)


@mcp.tool(name="get-price-proposal",
          description="Get detailed information about a price proposal including prices and related parties")
def get_price_proposal(
    biId: str = Field(description="Business interaction ID of the price proposal to retrieve"),
) -> str:
    return handlers.price_proposal(_ctx(), biId)


# ----------------------------- ENTRY -------------------------------

def main():
    try:
        cfg = GraphQLConfig()
    except ConfigError as e:
        logger.error("Fatal error in main()", extra={"meta": {"error": str(e)}})
        sys.exit(1)
    configure_logging(cfg)
    try:
        cfg.validate()
    except ConfigError as e:
        logger.error("Fatal error in main()", extra={"meta": {"error": str(e)}})
        sys.exit(1)
    logger.info("GraphQL MCP Server running on stdio")
    mcp.run()


if __name__ == "__main__":
    main()
