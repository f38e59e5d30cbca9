# mcp-farm/packages/mcp_graphql/mcp_graphql/business.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from . import library as lib
from .client import GraphQLTransport
from .errors import GraphQLMcpError

logger = logging.getLogger(__name__)


def _nodes(data: Any, root: str) -> List[Dict[str, Any]]:
    """edges -> node list for a relay-style connection under data[root]."""
    conn = (data or {}).get(root) if isinstance(data, dict) else None
    edges = (conn or {}).get("edges") or []
    return [e["node"] for e in edges if isinstance(e, dict) and e.get("node")]


def _first_node(data: Any, root: str) -> Optional[Dict[str, Any]]:
    nodes = _nodes(data, root)
    return nodes[0] if nodes else None


# ---------------- Deals ----------------
def get_deals_with_funding_nodes(transport: GraphQLTransport, deal_id: Optional[str] = None,
                                 limit: int = 5) -> List[Dict[str, Any]]:
    if deal_id:
        res = transport.execute(lib.load_query(lib.DEAL_WITH_FUNDING_NODES_BY_ID), {"dealId": deal_id})
    else:
        res = transport.execute(lib.load_query(lib.DEALS_WITH_FUNDING_NODES), {"limit": limit})
    res.raise_for_errors()
    return _nodes(res.data, "filterWileyasDeal")


# ---------------- Orders ----------------
def get_customer_order(transport: GraphQLTransport, bi_id: str) -> Optional[Dict[str, Any]]:
    res = transport.execute(lib.load_query(lib.CUSTOMER_ORDER), {"biId": bi_id}).raise_for_errors()
    return _first_node(res.data, "filterCustomerOrder")


def get_price_proposal(transport: GraphQLTransport, bi_id: str) -> Optional[Dict[str, Any]]:
    res = transport.execute(lib.load_query(lib.PRICE_PROPOSAL), {"biId": bi_id}).raise_for_errors()
    return _first_node(res.data, "filterWileyasPriceProposalCustomerOrder")


@dataclass
class AuthorLookup:
    success: bool
    message: str = ""
    attempted: List[str] = field(default_factory=list)
    data: Optional[Dict[str, Any]] = None


def get_order_author_details(transport: GraphQLTransport, order_bi_id: str) -> AuthorLookup:
    """
    Look up the related parties of an order. The dedicated author query is
    tried first; the full customer-order document is the fallback.
    """
    attempted: List[str] = []
    approaches = [
        ("order author query", lib.ORDER_AUTHOR_DETAILS, {"orderBiId": order_bi_id}),
        ("customer order query", lib.CUSTOMER_ORDER, {"biId": order_bi_id}),
    ]
    last_error: Optional[str] = None
    for label, doc, variables in approaches:
        attempted.append(label)
        try:
            res = transport.execute(lib.load_query(doc), variables).raise_for_errors()
        except GraphQLMcpError as e:
            logger.warning("Order author lookup failed", extra={"meta": {"approach": label, "error": str(e)}})
            last_error = str(e)
            continue
        order = _first_node(res.data, "filterCustomerOrder")
        if order:
            return AuthorLookup(success=True, attempted=attempted, data={"order": order})

    msg = f'Order with ID "{order_bi_id}" not found.'
    if last_error:
        msg = f"Could not retrieve author details for order {order_bi_id}: {last_error}"
    return AuthorLookup(success=False, message=msg, attempted=attempted)


# ---------------- Heartbeat ----------------
@dataclass
class HeartbeatResult:
    is_alive: bool
    response: Any = None
    error: Optional[str] = None


def check_heartbeat(transport: GraphQLTransport) -> HeartbeatResult:
    try:
        res = transport.execute(lib.load_query(lib.HEARTBEAT))
    except GraphQLMcpError as e:
        logger.error("Heartbeat check failed", extra={"meta": {"error": str(e)}})
        return HeartbeatResult(is_alive=False, error=str(e))
    msg = res.error_message()
    if msg:
        return HeartbeatResult(is_alive=False, error=msg)
    value = res.data.get("_heartbeat") if isinstance(res.data, dict) else res.data
    return HeartbeatResult(is_alive=True, response=value)
