# mcp-farm/packages/mcp_graphql/mcp_graphql/handlers.py
"""
Tool handlers. Each takes the AppCtx plus the tool's arguments and returns the
text shown to the MCP client. Nothing raised below this layer escapes: errors
become an "Error: ..." text with an optional hint.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, List, Optional

from graphql import GraphQLSyntaxError, parse

from . import business, formatters
from . import library as lib
from .context import AppCtx
from .errors import NotFoundError
from .models import OperationDescriptor
from .operations import OPERATION_KINDS, filter_operations, generate_example, render_type, resolve_operation
from .responses import (
    SUGGEST_SYNTAX,
    error_response,
    error_suggestion,
    graphql_block,
    json_block,
    json_response,
    log_tool_execution,
    to_json,
)

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50
OVERVIEW_LIMIT = 20

_PLURAL = {"query": "queries", "mutation": "mutations"}


def tool_boundary(action: str, hint: Optional[str] = None) -> Callable:
    """Turn any exception into an error text: `Error <action>: <message>` + hint."""
    def deco(fn: Callable[..., str]) -> Callable[..., str]:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> str:
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                msg = str(e) or e.__class__.__name__
                logger.error(f"Error {action}", extra={"meta": {"error": msg}}, exc_info=True)
                return error_response(f"Error {action}: {msg}", error_suggestion(msg) or hint)
        return wrapper
    return deco


# ---------------- execute-query ----------------
@tool_boundary("executing query")
def execute_query(ctx: AppCtx, query: str, variables: Optional[Dict[str, Any]] = None,
                  validate_only: bool = False) -> str:
    if not (query or "").strip():
        return error_response("Query cannot be empty. Please provide a valid GraphQL query.")

    normalized = query.strip().lower()
    if "query" not in normalized and "mutation" not in normalized:
        logger.warning("Invalid query format, missing query or mutation keyword")
        return error_response(
            "Invalid query format. GraphQL operations should start with 'query' or 'mutation'.",
            "If you're not sure how to format your query, try using the generate-query tool to create a template.",
        )

    compact = " ".join(query.split())
    log_tool_execution("execute-query", {"validateOnly": validate_only},
                       compact[:100] + ("..." if len(compact) > 100 else ""))

    if validate_only:
        try:
            parse(query)
        except GraphQLSyntaxError as e:
            return error_response(f"Query failed validation: {e.message}", SUGGEST_SYNTAX)
        return (
            "Query validated successfully. Ready to execute:\n\n"
            f"Query:\n{graphql_block(query)}\n\n"
            f"Variables:\n{json_block(variables or {})}\n\n"
            "To execute this query, call the execute-query tool again with validateOnly set to false."
        )

    result = ctx.transport.execute(query, variables)
    msg = result.error_message()
    if msg:
        logger.warning("GraphQL execution returned an error", extra={"meta": {"errorMessage": msg}})
        return error_response(
            f"Error from GraphQL API: {msg}",
            "Please check your query syntax and variables. You can use the list-queries or "
            "list-mutations tools to see available operations.",
        )
    return f"Query executed successfully:\n\nResult:\n{json_block(result.data)}"


# ---------------- get-schema ----------------
@tool_boundary("retrieving schema",
               "This could be due to network issues or authentication problems. "
               "Please check your .env file configuration.")
def get_schema(ctx: AppCtx, type_name: Optional[str] = None, field_name: Optional[str] = None,
               include_queries: bool = True, include_mutations: bool = True) -> str:
    log_tool_execution("get-schema", {"typeName": type_name, "fieldName": field_name,
                                      "includeQueries": include_queries, "includeMutations": include_mutations})
    schema = ctx.schema.get()

    if type_name:
        type_info = schema.find_type(type_name)
        if type_info is None:
            logger.warning("Type not found in schema", extra={"meta": {"typeName": type_name}})
            return error_response(f'Type "{type_name}" not found in schema.')
        if field_name:
            fields = type_info.get("fields") or type_info.get("inputFields") or []
            field = next((f for f in fields if f.get("name") == field_name), None)
            if field is None:
                logger.warning("Field not found in type", extra={"meta": {"typeName": type_name, "fieldName": field_name}})
                return error_response(f'Field "{field_name}" not found in type "{type_name}".')
            return f"Field: {type_name}.{field_name}\n\n{to_json(field)}"
        return f"Type: {type_name}\n\n{to_json(type_info)}"

    lines = [
        "GraphQL Schema Overview:",
        f"- Total Types: {len(schema.types)}",
        f"- Query Fields: {len(schema.queries)}",
        f"- Mutation Fields: {len(schema.mutations)}",
        "",
    ]

    def _section(title: str, ops: List[OperationDescriptor]) -> None:
        lines.append(f"{title} ({len(ops)}):")
        shown = [op for op in ops if not field_name or field_name in op.name][:OVERVIEW_LIMIT]
        for op in shown:
            lines.append(f"- {op.name}: {op.description or 'No description'}")
        lines.append("")

    if include_queries and schema.queries:
        _section("Available Queries", schema.queries)
    if include_mutations and schema.mutations:
        _section("Available Mutations", schema.mutations)
    return "\n".join(lines).rstrip() + "\n"


# ---------------- list-queries / list-mutations ----------------
def _format_operation(index: int, op: OperationDescriptor, kind: str, with_example: bool) -> str:
    lines = [f"{index}. **{op.name}**"]
    if op.description:
        lines.append(f"   Description: {op.description}")
    if op.args:
        lines.append(f"   Arguments: {', '.join(f'{a.name}: {render_type(a.type)}' for a in op.args)}")
    if with_example:
        example = generate_example(op, kind)
        if not example.empty:
            lines.append(f"   Example:\n{graphql_block(example.query_text)}")
            if example.variables:
                lines.append(f"   Variables:\n{json_block(example.variables)}")
    return "\n".join(lines) + "\n"


def list_operations(ctx: AppCtx, kind: str, search: Optional[str] = None,
                    generate_examples: bool = False, limit: Optional[int] = DEFAULT_LIST_LIMIT) -> str:
    plural = _PLURAL[kind]

    @tool_boundary(f"listing {plural}", "This could be due to network issues or authentication problems.")
    def _run() -> str:
        log_tool_execution(f"list-{plural}", {"search": search, "generateExample": generate_examples, "limit": limit})
        operations = ctx.schema.get().operations(kind)
        if not operations:
            return error_response(f"No {plural} found in the GraphQL schema")

        shown = filter_operations(operations, search, limit or DEFAULT_LIST_LIMIT)
        header = f"Found {len(shown)} {plural}"
        if search:
            header += f' matching "{search}"'
        parts = [header + ":\n"]
        parts += [_format_operation(i, op, kind, generate_examples) for i, op in enumerate(shown, 1)]
        if generate_examples and shown:
            parts.append(f"Use the generate-query tool with any of these {kind} names to get example usage.")
        return "\n".join(parts)

    return _run()


def list_queries(ctx: AppCtx, search: Optional[str] = None, generate_examples: bool = False,
                 limit: Optional[int] = DEFAULT_LIST_LIMIT) -> str:
    return list_operations(ctx, "query", search, generate_examples, limit)


def list_mutations(ctx: AppCtx, search: Optional[str] = None, generate_examples: bool = False,
                   limit: Optional[int] = DEFAULT_LIST_LIMIT) -> str:
    return list_operations(ctx, "mutation", search, generate_examples, limit)


# ---------------- type-details ----------------
@tool_boundary("retrieving type details")
def type_details(ctx: AppCtx, type_name: str) -> str:
    log_tool_execution("type-details", {"typeName": type_name})
    res = ctx.transport.execute(lib.load_query(lib.TYPE_DETAILS), {"typeName": type_name}).raise_for_errors()
    details = res.data.get("__type") if isinstance(res.data, dict) else None
    if not details:
        logger.warning("Type not found in schema", extra={"meta": {"typeName": type_name}})
        return error_response(f'Type "{type_name}" not found in schema.')
    return json_response(details, f"Type Details: {type_name}")


# ---------------- generate-query ----------------
@tool_boundary("generating template")
def generate_query(ctx: AppCtx, operation_name: str, operation_type: str) -> str:
    log_tool_execution("generate-query", {"operationName": operation_name, "operationType": operation_type})
    if operation_type not in OPERATION_KINDS:
        return error_response(f'Invalid operationType "{operation_type}". Use "query" or "mutation".')

    operation = resolve_operation(ctx.schema.get(), operation_type, operation_name)
    if operation is None:
        err = NotFoundError(operation_type, operation_name)
        logger.warning(str(err))
        return error_response(str(err),
                              f"Try using list-{_PLURAL[operation_type]} tool with a search term "
                              "to find available operations.")
    if operation.name.lower() != operation_name.lower():
        logger.info(f'No exact match for "{operation_name}", using closest match "{operation.name}"')

    example = generate_example(operation, operation_type)
    if example.empty:
        return error_response(f'Error generating {operation_type} example for "{operation_name}".')

    lines = [f"# {operation_type.upper()}: {operation.name}"]
    if operation.description:
        lines.append(f"# Description: {operation.description}")
    lines += [
        "",
        "# Query Text:",
        graphql_block(example.query_text),
        "",
        "# Variables:",
        json_block(example.variables),
        "",
        "# Usage:",
        f"To execute this {operation_type}, use the execute-query tool with the query text and variables.",
    ]
    return "\n".join(lines)


# ---------------- check-heartbeat ----------------
@tool_boundary("checking the GraphQL server heartbeat")
def check_heartbeat(ctx: AppCtx) -> str:
    log_tool_execution("check-heartbeat", {})
    hb = business.check_heartbeat(ctx.transport)
    if hb.is_alive:
        return f"✅ GraphQL server is alive and responding!\n\nHeartbeat response: {hb.response}"
    return error_response(
        "❌ GraphQL server heartbeat check failed.\n\n"
        f"Error: {hb.error}\n\n"
        "Possible issues:\n"
        "1. The GraphQL server may be down or unreachable\n"
        "2. Network connectivity issues\n"
        "3. Authentication issues with the OAuth token\n"
        "4. The server doesn't implement the '_heartbeat' query\n\n"
        "Try checking your .env file configuration and ensure the server is running."
    )


# ---------------- refresh-schema ----------------
@tool_boundary("refreshing schema")
def refresh_schema(ctx: AppCtx) -> str:
    log_tool_execution("refresh-schema", {})
    schema = ctx.schema.refresh()
    return (
        "Schema refreshed successfully:\n"
        f"- Total Types: {len(schema.types)}\n"
        f"- Query Fields: {len(schema.queries)}\n"
        f"- Mutation Fields: {len(schema.mutations)}"
    )


# ---------------- domain tools ----------------
@tool_boundary("retrieving deals with funding nodes",
               "This could be due to an issue with the GraphQL API or structure changes in the API.")
def deal_with_funding_nodes(ctx: AppCtx, deal_id: Optional[str] = None, limit: int = 5) -> str:
    log_tool_execution("get-deal-with-funding-nodes", {"dealId": deal_id, "limit": limit})
    deals = business.get_deals_with_funding_nodes(ctx.transport, deal_id, limit)
    if not deals:
        logger.warning("No deals found", extra={"meta": {"dealId": deal_id}})
        return error_response(f'No deal found with ID "{deal_id}".' if deal_id else "No deals found in the system.")
    return json_response(formatters.summarize_deals(deals),
                         f"Found {len(deals)} deal(s) with funding information:")


@tool_boundary("retrieving order author details",
               "This could be due to an issue with the GraphQL API or authentication problems.")
def order_author_details(ctx: AppCtx, order_bi_id: str) -> str:
    log_tool_execution("get-order-author-details", {"orderBiId": order_bi_id})
    lookup = business.get_order_author_details(ctx.transport, order_bi_id)
    if not lookup.success:
        attempted = f"Attempted approaches: {', '.join(lookup.attempted)}" if lookup.attempted else None
        return error_response(lookup.message, attempted)
    return formatters.format_order_authors(lookup.data)


@tool_boundary("retrieving customer order",
               "This could be due to an issue with the GraphQL API or the order ID format.")
def customer_order(ctx: AppCtx, bi_id: str) -> str:
    log_tool_execution("get-customer-order", {"biId": bi_id})
    order = business.get_customer_order(ctx.transport, bi_id)
    if not order:
        logger.warning("Customer order not found", extra={"meta": {"biId": bi_id}})
        return error_response(f'Customer order with ID "{bi_id}" not found.')
    return formatters.format_customer_order(order)


@tool_boundary("retrieving price proposal",
               "This could be due to an issue with the GraphQL API or the proposal ID format.")
def price_proposal(ctx: AppCtx, bi_id: str) -> str:
    log_tool_execution("get-price-proposal", {"biId": bi_id})
    proposal = business.get_price_proposal(ctx.transport, bi_id)
    if not proposal:
        logger.warning("Price proposal not found", extra={"meta": {"biId": bi_id}})
        return error_response(f'Price proposal with ID "{bi_id}" not found.')
    return formatters.format_price_proposal(proposal)
