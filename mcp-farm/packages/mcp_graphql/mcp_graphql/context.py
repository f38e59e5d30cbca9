# mcp-farm/packages/mcp_graphql/mcp_graphql/context.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

import requests

from .auth import TokenProvider
from .client import GraphQLTransport
from .config import GraphQLConfig
from .schema_cache import SchemaCache


@dataclass
class AppCtx:
    config: GraphQLConfig
    tokens: TokenProvider
    transport: GraphQLTransport
    schema: SchemaCache


def build_context(cfg: Optional[GraphQLConfig] = None, session: Optional[requests.Session] = None) -> AppCtx:
    """Wire the token provider, transport and schema cache around one HTTP session."""
    cfg = cfg or GraphQLConfig()
    session = session or requests.Session()
    tokens = TokenProvider(cfg, session=session)
    transport = GraphQLTransport(cfg, tokens, session=session)
    return AppCtx(config=cfg, tokens=tokens, transport=transport, schema=SchemaCache(transport))
