# mcp-farm/packages/mcp_graphql/mcp_graphql/responses.py
"""Uniform text envelope shared by every tool."""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import orjson

logger = logging.getLogger(__name__)

SUGGEST_SYNTAX = ("There appears to be a syntax error in your query. Try using the generate-query tool "
                  "to create a valid query template.")
SUGGEST_AUTH = ("This appears to be an authentication error. The server may be having issues with the "
                "OAuth token. Please check your authentication credentials in the .env file.")
SUGGEST_NETWORK = ("There was a network error connecting to the GraphQL server. Please check your "
                   "GRAPHQL_URL in the .env file and ensure the server is running.")

_PATTERNS = (
    (("syntax", "parsing"), SUGGEST_SYNTAX),
    (("authentication", "authorization", "unauthorized", "forbidden", "401", "403"), SUGGEST_AUTH),
    (("network", "econnrefused", "connection", "timeout", "timed out"), SUGGEST_NETWORK),
)


def to_json(data: Any) -> str:
    return orjson.dumps(data, default=str, option=orjson.OPT_INDENT_2).decode("utf-8")


def json_block(data: Any) -> str:
    return f"```json\n{to_json(data)}\n```"


def graphql_block(text: str) -> str:
    return f"```graphql\n{text}\n```"


def error_suggestion(message: str) -> str:
    low = (message or "").lower()
    for needles, suggestion in _PATTERNS:
        if any(n in low for n in needles):
            return suggestion
    return ""


def error_response(message: str, suggestion: Optional[str] = None) -> str:
    text = f"Error: {message}"
    if suggestion:
        text += f"\n\n{suggestion}"
    return text


def json_response(data: Any, title: Optional[str] = None) -> str:
    text = f"{title}\n\n" if title else ""
    return text + json_block(data)


def log_tool_execution(tool: str, params: Dict[str, Any], preview: Optional[str] = None) -> None:
    logger.info(f"Executing {tool}", extra={"meta": {
        "preview": preview or to_json(params).replace("\n", " ")[:100],
        "hasParams": any(v is not None for v in params.values()),
    }})
