# mcp-farm/packages/mcp_graphql/mcp_graphql/library.py
"""Static GraphQL documents shipped with the package (queries/*.graphql)."""
from __future__ import annotations
from functools import lru_cache
from pathlib import Path
from typing import List

QUERIES_DIR = Path(__file__).resolve().parent / "queries"

INTROSPECTION = "introspection"
TYPE_DETAILS = "type_details"
HEARTBEAT = "heartbeat"
DEALS_WITH_FUNDING_NODES = "deals_with_funding_nodes"
DEAL_WITH_FUNDING_NODES_BY_ID = "deal_with_funding_nodes_by_id"
CUSTOMER_ORDER = "customer_order"
PRICE_PROPOSAL = "price_proposal"
ORDER_AUTHOR_DETAILS = "order_author_details"


def available_queries() -> List[str]:
    return sorted(p.stem for p in QUERIES_DIR.glob("*.graphql"))


@lru_cache(maxsize=None)
def load_query(name: str) -> str:
    path = QUERIES_DIR / f"{name}.graphql"
    if not path.exists():
        raise KeyError(f"unknown query document: {name} (have: {available_queries()})")
    with open(path, "r", encoding="utf-8") as f:
        return f.read()
