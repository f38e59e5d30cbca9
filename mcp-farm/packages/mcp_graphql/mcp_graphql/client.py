# mcp-farm/packages/mcp_graphql/mcp_graphql/client.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from .auth import TokenProvider
from .config import GraphQLConfig
from .errors import GraphQLResponseError, TransportError

logger = logging.getLogger(__name__)


@dataclass
class GraphQLResult:
    """
    Canonical response shape. Upstream clients wrap payloads inconsistently
    (`{"data": ...}` vs. the bare data object), so we decode exactly once here.
    """
    data: Any = None
    errors: List[Any] = field(default_factory=list)
    raw: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> "GraphQLResult":
        if isinstance(payload, dict) and "data" in payload:
            errors = payload.get("errors") or []
            return cls(data=payload["data"], errors=errors if isinstance(errors, list) else [errors], raw=payload)
        if isinstance(payload, dict) and payload.get("errors"):
            errors = payload["errors"]
            return cls(data=None, errors=errors if isinstance(errors, list) else [errors], raw=payload)
        return cls(data=payload, raw=payload)

    def error_message(self) -> Optional[str]:
        if self.errors:
            first = self.errors[0]
            if isinstance(first, str):
                return first
            if isinstance(first, dict) and first.get("message"):
                return str(first["message"])
            return "Unknown GraphQL error format"
        raw = self.raw
        if isinstance(raw, dict) and isinstance(raw.get("error"), dict) and raw["error"].get("message"):
            return str(raw["error"]["message"])
        return None

    def raise_for_errors(self) -> "GraphQLResult":
        msg = self.error_message()
        if msg is not None:
            raise GraphQLResponseError(msg, self.errors)
        return self


class GraphQLTransport:
    """POSTs GraphQL documents with a freshly resolved OAuth token."""

    def __init__(self, cfg: GraphQLConfig, tokens: TokenProvider, session: Optional[requests.Session] = None):
        self.cfg = cfg
        self.tokens = tokens
        self._session = session or requests.Session()

    def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> GraphQLResult:
        token = self.tokens.get_access_token()
        # forwarded verbatim: the identity provider decides whether a scheme prefix is present
        headers = {
            "authorization": token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        body = {"query": document, "variables": variables or {}}
        try:
            r = self._session.post(self.cfg.graphql_url, json=body, headers=headers,
                                   timeout=self.cfg.request_timeout)
        except requests.Timeout as e:
            logger.error("GraphQL request timeout", extra={"meta": {"url": self.cfg.graphql_url}})
            raise TransportError(f"GraphQL request timeout after {self.cfg.request_timeout}s: {e}") from e
        except requests.RequestException as e:
            logger.error("Error executing GraphQL query", extra={"meta": {"error": str(e)}})
            raise TransportError(f"GraphQL network error: {e}") from e

        if r.status_code in (401, 403):
            # token rejected upstream; the next call exchanges a fresh one
            self.tokens.invalidate()
        if not r.ok:
            logger.error("GraphQL request failed", extra={"meta": {
                "status": r.status_code, "url": self.cfg.graphql_url, "body": r.text[:2000]}})
            raise TransportError(f"GraphQL request failed: {r.reason}", status_code=r.status_code, body=r.text)

        try:
            payload = r.json()
        except ValueError as e:
            raise TransportError("GraphQL response is not valid JSON", status_code=r.status_code, body=r.text) from e

        result = GraphQLResult.from_payload(payload)
        if result.errors:
            logger.warning("GraphQL response carried errors", extra={"meta": {"errorMessage": result.error_message()}})
        return result
