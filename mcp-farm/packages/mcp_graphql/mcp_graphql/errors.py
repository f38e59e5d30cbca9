from __future__ import annotations
from typing import Any, List, Optional


class GraphQLMcpError(Exception):
    """Base for every error this server reports back to a tool caller."""


class ConfigError(GraphQLMcpError):
    """Required configuration is missing. Fatal at startup."""


class AuthError(GraphQLMcpError):
    """OAuth client-credentials exchange failed. Retried lazily on the next call."""


class TransportError(GraphQLMcpError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        detail = message
        if status_code is not None:
            detail = f"{detail} [{status_code}]"
        if body:
            detail = f"{detail} - {body[:500]}"
        super().__init__(detail)
        self.status_code = status_code
        self.body = body


class GraphQLResponseError(GraphQLMcpError):
    """The endpoint answered with an `errors` array (or an unusable payload)."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(GraphQLMcpError):
    def __init__(self, kind: str, name: str):
        super().__init__(f'No matching {kind} found for "{name}".')
        self.kind = kind
        self.name = name
