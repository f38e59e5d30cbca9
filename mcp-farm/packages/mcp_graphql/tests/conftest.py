# mcp-farm/packages/mcp_graphql/tests/conftest.py
from __future__ import annotations
import json
from typing import Any, Callable, Dict, List, Optional

import pytest

from mcp_graphql.client import GraphQLResult
from mcp_graphql.config import GraphQLConfig
from mcp_graphql.context import AppCtx
from mcp_graphql.schema_cache import SchemaCache


# ---------------- HTTP fakes ----------------
class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None,
                 reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class FakeSession:
    """Stands in for requests.Session; `responder(url, kwargs)` returns a FakeResponse or raises."""

    def __init__(self, responder: Callable[[str, Dict[str, Any]], FakeResponse]):
        self.responder = responder
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        return self.responder(url, kwargs)


class FakeTransport:
    """GraphQLTransport stand-in routing on the operation text."""

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.calls: List[Dict[str, Any]] = []

    def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> GraphQLResult:
        self.calls.append({"document": document, "variables": variables})
        for needle, payload in self.routes.items():
            if needle in document:
                if isinstance(payload, Exception):
                    raise payload
                if callable(payload):
                    payload = payload(variables)
                return GraphQLResult.from_payload(payload)
        raise AssertionError(f"unrouted document: {document[:80]}")


# ---------------- introspection helpers ----------------
def named(name: str, kind: str = "SCALAR") -> Dict[str, Any]:
    return {"kind": kind, "name": name, "ofType": None}


def non_null(inner: Dict[str, Any]) -> Dict[str, Any]:
    return {"kind": "NON_NULL", "name": None, "ofType": inner}


def list_of(inner: Dict[str, Any]) -> Dict[str, Any]:
    return {"kind": "LIST", "name": None, "ofType": inner}


def arg(name: str, type_: Dict[str, Any], description: Optional[str] = None) -> Dict[str, Any]:
    return {"name": name, "description": description, "type": type_}


def op(name: str, args: Optional[List[Dict[str, Any]]] = None, description: Optional[str] = None) -> Dict[str, Any]:
    return {"name": name, "description": description, "args": args or [], "type": named("Order", "OBJECT")}


def introspection(queries: List[Dict[str, Any]], mutations: Optional[List[Dict[str, Any]]] = None,
                  types: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {"data": {"__schema": {
        "queryType": {"name": "Query", "fields": queries},
        "mutationType": {"name": "Mutation", "fields": mutations or []} if mutations is not None else None,
        "types": types or [],
    }}}


SAMPLE_TYPES = [
    {"kind": "OBJECT", "name": "Order", "description": "A customer order",
     "fields": [
         {"name": "id", "description": None, "args": [], "type": non_null(named("ID"))},
         {"name": "name", "description": "Display name", "args": [], "type": named("String")},
     ],
     "inputFields": None, "enumValues": None},
    {"kind": "INPUT_OBJECT", "name": "CustomerInput", "description": None, "fields": None,
     "inputFields": [{"name": "email", "description": None, "type": non_null(named("String"))}],
     "enumValues": None},
]

SAMPLE_QUERIES = [
    op("getCustomerOrder", [arg("biId", non_null(named("String")))], "Fetch one customer order"),
    op("orders", [arg("first", named("Int")), arg("filter", named("OrderFilterInput", "INPUT_OBJECT"))],
       "List orders"),
    op("_heartbeat", description="Liveness probe"),
    op("tagsByIds", [arg("ids", non_null(list_of(non_null(named("ID")))))]),
]

SAMPLE_MUTATIONS = [
    op("createCustomer", [arg("input", non_null(named("CustomerInput", "INPUT_OBJECT")))], "Create a customer"),
]


@pytest.fixture
def sample_introspection() -> Dict[str, Any]:
    return introspection(SAMPLE_QUERIES, SAMPLE_MUTATIONS, SAMPLE_TYPES)


@pytest.fixture
def cfg() -> GraphQLConfig:
    return GraphQLConfig(
        client_id="cid",
        client_secret="secret",
        auth_url="https://auth.example.test/token",
        graphql_url="https://api.example.test/graphql",
        log_level="debug",
        environment="test",
        log_dir="logs",
        request_timeout=5.0,
        token_margin=60,
    )


@pytest.fixture
def make_ctx(cfg):
    def _make(routes: Dict[str, Any]) -> AppCtx:
        transport = FakeTransport(routes)
        return AppCtx(config=cfg, tokens=None, transport=transport, schema=SchemaCache(transport))
    return _make
