# mcp-farm/packages/mcp_graphql/mcp_graphql/schema_cache.py
from __future__ import annotations
import logging
import threading
from typing import Optional

from .client import GraphQLTransport
from .errors import GraphQLResponseError
from .library import INTROSPECTION, load_query
from .models import IntrospectionSchema, locate_schema

logger = logging.getLogger(__name__)


class SchemaCache:
    """
    Single slot holding the last fetched introspection result.
    Filled lazily on first get(); replaced only by refresh(). One fetch at a time.
    """

    def __init__(self, transport: GraphQLTransport):
        self.transport = transport
        self._schema: Optional[IntrospectionSchema] = None
        self._lock = threading.Lock()

    def peek(self) -> Optional[IntrospectionSchema]:
        return self._schema

    def clear(self) -> None:
        self._schema = None

    def get(self) -> IntrospectionSchema:
        schema = self._schema
        if schema is not None:
            return schema
        with self._lock:
            if self._schema is None:
                self._schema = self._fetch()
            return self._schema

    def refresh(self) -> IntrospectionSchema:
        with self._lock:
            self._schema = self._fetch()
            return self._schema

    def _fetch(self) -> IntrospectionSchema:
        logger.info("Fetching GraphQL schema...")
        result = self.transport.execute(load_query(INTROSPECTION))
        raw = locate_schema(result.data)
        if raw is None:
            msg = result.error_message()
            if msg:
                raise GraphQLResponseError(f"Schema introspection failed: {msg}", result.errors)
            logger.error("Schema data not available or in unexpected format", extra={"meta": {
                "topLevelKeys": sorted(result.data.keys()) if isinstance(result.data, dict) else None}})
            raise GraphQLResponseError(
                "Schema data not available or in unexpected format. Please ensure the GraphQL "
                "server is accessible and the schema has been fetched.")
        schema = IntrospectionSchema.from_dict(raw)
        logger.info("Schema fetched successfully", extra={"meta": {
            "types": len(schema.types), "queries": len(schema.queries), "mutations": len(schema.mutations)}})
        return schema
