# mcp-farm/packages/mcp_graphql/mcp_graphql/formatters.py
"""Markdown renderers for the domain tools. Each ends with the raw payload."""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from .responses import json_block

NA = "N/A"


def _v(obj: Optional[Dict[str, Any]], key: str, default: str = NA) -> Any:
    if not isinstance(obj, dict):
        return default
    value = obj.get(key)
    return default if value is None or value == "" else value


def _edges(conn: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not isinstance(conn, dict):
        return []
    return [e for e in (conn.get("edges") or []) if isinstance(e, dict)]


def _amount(money: Optional[Dict[str, Any]]) -> str:
    total = (money or {}).get("totalAmount") if isinstance(money, dict) else None
    if not total:
        return "Not specified"
    return f"{_v(total, 'amount')} {_v(total, 'currency', '')}".strip()


def _raw(data: Any, title: str = "Complete Raw Data") -> str:
    return f"## {title}\n\n{json_block(data)}"


# ---------------- Deals ----------------
def summarize_deals(deals: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for deal in deals:
        nodes = deal.get("allFundingNodes") or []
        out.append({
            "id": deal.get("id"),
            "biId": deal.get("biId"),
            "name": deal.get("biName"),
            "description": deal.get("biDescription"),
            "versionId": deal.get("versionId"),
            "versionCode": deal.get("versionCode"),
            "status": deal.get("dealStatus"),
            "period": f"{_v(deal, 'startDate')} to {_v(deal, 'endDate')}",
            "currency": deal.get("currency"),
            "createdAt": deal.get("createdAt"),
            "modifiedAt": deal.get("modifiedAt"),
            "fundingNodesCount": len(nodes),
            "fundingNodes": [{
                "id": n.get("id"),
                "name": _v(n.get("node"), "name", "Unnamed Node"),
                "organization": _v(n.get("organisation"), "paName", "Unknown Organization"),
                "versionId": _v(n, "versionId", "Not specified"),
                "goldOA": _amount(n.get("goldOA")),
                "hybridOA": _amount(n.get("hybridOA")),
            } for n in nodes],
        })
    return out


# ---------------- Parties ----------------
def _party_lines(party: Dict[str, Any]) -> List[str]:
    return [
        f"- **Party ID**: {_v(party, 'paId')}",
        f"- **UID**: {_v(party, 'uid')}",
        f"- **ALM ID**: {_v(party, 'wAlmId')}",
        f"- **Author ID**: {_v(party, 'wAuthorID')}",
        f"- **Email**: {_v(party, 'wEmail')}",
        f"- **SAP ID**: {_v(party, 'wSAPId')}",
        f"- **Organization**: {_v(party, 'wAsOrganization')}",
        f"- **Institution**: {_v(party, 'wAsInstitution')}",
        f"- **Department**: {_v(party, 'wAsDepartment')}",
    ]


def format_order_authors(data: Optional[Dict[str, Any]]) -> str:
    order = (data or {}).get("order")
    if not order:
        return "No order data available in the response."

    lines = [
        f"# Order Author Details for Order {_v(order, 'biId', 'Unknown')}",
        "",
        "## Order Information",
        f"- **Order ID**: {_v(order, 'biId')}",
        f"- **UID**: {_v(order, 'uid')}",
        f"- **Created At**: {_v(order, 'createdAt')}",
        f"- **Modified At**: {_v(order, 'modifiedAt')}",
        "",
    ]
    edges = _edges(order.get("prRelatedParties"))
    if edges:
        lines += [f"## Related Authors ({len(edges)})", ""]
        for i, edge in enumerate(edges, 1):
            lines.append(f"### Author {i}")
            lines.append(f"- **Mapping Code**: {_v(edge.get('mapsOn'), 'code')}")
            lines += _party_lines(edge.get("node") or {})
            lines.append("")
    else:
        lines += ["## Related Authors", "No related authors found for this order.", ""]
    lines.append(_raw(data))
    return "\n".join(lines)


# ---------------- Customer order ----------------
def _prices_section(conn: Optional[Dict[str, Any]], empty: str) -> List[str]:
    edges = _edges(conn)
    if not edges:
        return ["## Prices", empty, ""]
    lines = [f"## Prices ({len(edges)})"]
    for edge in edges:
        node = edge.get("node") or {}
        code = _v(edge.get("mapsOn"), "code", "PRICE")
        lines.append(f"- **{code}**: {_v(node, 'amount')} {_v(node.get('units'), 'code', '')}".rstrip())
    lines.append("")
    return lines


def format_customer_order(order: Dict[str, Any]) -> str:
    lines = [
        f"# Customer Order Details: {_v(order, 'biId', 'Unknown')}",
        "",
        "## Order Information",
        f"- **Business ID**: {_v(order, 'biId')}",
        f"- **UID**: {_v(order, 'uid')}",
        f"- **Status**: {_v(order.get('bpStatus'), 'name')}",
        f"- **Payment Status**: {_v(order, 'wPaymentStatus')}",
        f"- **SAP Order ID**: {_v(order, 'wAsSapOrderId')}",
        f"- **Created At**: {_v(order, 'createdAt')}",
        f"- **Modified At**: {_v(order, 'modifiedAt')}",
        "",
    ]

    payment = order.get("paybPayment")
    if payment:
        lines += ["## Payment Information", f"- **Payment Type**: {_v(payment, 'typeName')}"]
        if payment.get("ccpaCardType"):
            lines.append(f"- **Card Type**: {payment['ccpaCardType']}")
        if payment.get("ccpaNameOnCard"):
            lines.append(f"- **Name on Card**: {payment['ccpaNameOnCard']}")
        lines.append("")

    addr = order.get("paybBillingAddress")
    if addr:
        country = addr.get("gadCountry") or {}
        lines += [
            "## Billing Address",
            f"- **Address Line 1**: {_v(addr, 'upaLine1')}",
            f"- **Address Line 2**: {_v(addr, 'upaLine2')}",
            f"- **City**: {_v(addr, 'upaCity')}",
            f"- **State/Province**: {_v(addr, 'gadStateOrProvince')}",
            f"- **Country**: {_v(country, 'name')} ({_v(country, 'iso2Code')})",
            f"- **Postal Code**: {_v(addr, 'upaPostcode')}",
            f"- **Phone**: {_v(addr, 'upaPhoneNumber')}",
            f"- **Email**: {_v(addr, 'upaEmail')}",
            "",
        ]

    if order.get("pricPrice"):
        lines += _prices_section(order.get("pricPrice"), "No prices found for this order.")

    lines.append(_raw(order))
    return "\n".join(lines)


# ---------------- Price proposal ----------------
def format_price_proposal(proposal: Dict[str, Any]) -> str:
    lines = [
        f"# Price Proposal Details: {_v(proposal, 'biId', 'Unknown')}",
        "",
        "## Proposal Information",
        f"- **Business ID**: {_v(proposal, 'biId')}",
        f"- **Name**: {_v(proposal, 'biName')}",
        f"- **Description**: {_v(proposal, 'biDescription')}",
        f"- **WOA Code**: {_v(proposal, 'wAsWoaCode')}",
        f"- **Created At**: {_v(proposal, 'createdAt')}",
        f"- **Modified At**: {_v(proposal, 'modifiedAt')}",
        "",
    ]
    lines += _prices_section(proposal.get("pricPrice"), "No prices found for this proposal.")

    edges = _edges(proposal.get("prRelatedParties"))
    if not edges:
        lines += ["## Related Parties", "No related parties found for this proposal.", ""]
    else:
        lines += [f"## Related Parties ({len(edges)})", ""]
        by_role: Dict[str, List[Dict[str, Any]]] = {}
        for edge in edges:
            role = _v(edge.get("mapsOn"), "code", "Unknown Role")
            by_role.setdefault(role, []).append(edge.get("node") or {})
        for role, parties in by_role.items():
            lines += [f"### {role} ({len(parties)})", ""]
            for i, party in enumerate(parties, 1):
                lines.append(f"#### {i}. {_v(party, 'wEmail', _v(party, 'uid', 'Unknown Party'))}")
                lines += _party_lines(party)
                lines.append("")

    lines.append(_raw(proposal, "Complete Data (JSON)"))
    return "\n".join(lines)
