# mcp-farm/packages/mcp_graphql/tests/test_domain_tools.py
from mcp_graphql import business, handlers
from mcp_graphql.formatters import format_order_authors, summarize_deals

BY_ID = "GetDealWithFundingNodesById"
LIST = "GetDealWithFundingNodes($limit"


def _conn(root, *nodes):
    return {"data": {root: {"edges": [{"node": n} for n in nodes]}}}


DEAL = {
    "id": "d-1", "biId": "D1", "biName": "Wiley Open Deal", "biDescription": "Transformational agreement",
    "versionId": "v3", "versionCode": "2024", "dealStatus": "ACTIVE",
    "startDate": "2024-01-01", "endDate": "2024-12-31", "currency": "USD",
    "allFundingNodes": [{
        "id": "fn-1", "versionId": None,
        "node": {"name": "Main Fund"},
        "organisation": {"paName": "Wiley Org"},
        "goldOA": {"totalAmount": {"amount": 1000, "currency": "USD"}},
        "hybridOA": None,
    }],
}

AUTHOR = {"paId": "p-1", "uid": "u-1", "wEmail": "a@example.org", "wAsInstitution": "Uni"}

ORDER = {
    "biId": "3202523", "uid": "o-1", "createdAt": "2024-05-01",
    "bpStatus": {"name": "Paid"},
    "prRelatedParties": {"edges": [{"mapsOn": {"code": "AUTHOR"}, "node": AUTHOR}]},
    "pricPrice": {"edges": [{"mapsOn": {"code": "APC"}, "node": {"amount": 3000, "units": {"code": "USD"}}}]},
}


# ---------------- deals ----------------
def test_deal_by_id(make_ctx):
    ctx = make_ctx({BY_ID: _conn("filterWileyasDeal", DEAL)})
    out = handlers.deal_with_funding_nodes(ctx, "D1")
    assert out.startswith("Found 1 deal(s) with funding information:")
    assert '"fundingNodesCount": 1' in out
    assert '"organization": "Wiley Org"' in out
    assert ctx.transport.calls[0]["variables"] == {"dealId": "D1"}


def test_deal_listing_passes_limit(make_ctx):
    ctx = make_ctx({LIST: _conn("filterWileyasDeal", DEAL, dict(DEAL, biId="D2"))})
    out = handlers.deal_with_funding_nodes(ctx, None, 3)
    assert out.startswith("Found 2 deal(s)")
    assert ctx.transport.calls[0]["variables"] == {"limit": 3}


def test_deal_not_found_messages(make_ctx):
    ctx = make_ctx({BY_ID: _conn("filterWileyasDeal"), LIST: _conn("filterWileyasDeal")})
    assert handlers.deal_with_funding_nodes(ctx, "D9") == 'Error: No deal found with ID "D9".'
    assert handlers.deal_with_funding_nodes(ctx) == "Error: No deals found in the system."


def test_summarize_deals_flattens_funding_nodes():
    [summary] = summarize_deals([DEAL])
    assert summary["period"] == "2024-01-01 to 2024-12-31"
    node = summary["fundingNodes"][0]
    assert node["name"] == "Main Fund"
    assert node["goldOA"] == "1000 USD"
    assert node["hybridOA"] == "Not specified"
    assert node["versionId"] == "Not specified"


# ---------------- order authors ----------------
def test_order_authors_from_dedicated_query(make_ctx):
    ctx = make_ctx({"GetOrderAuthorDetails": _conn("filterCustomerOrder", ORDER)})
    out = handlers.order_author_details(ctx, "3202523")
    assert out.startswith("# Order Author Details for Order 3202523")
    assert "## Related Authors (1)" in out
    assert "- **Mapping Code**: AUTHOR" in out
    assert "- **Email**: a@example.org" in out
    assert "- **SAP ID**: N/A" in out
    assert "## Complete Raw Data" in out


def test_order_authors_fall_back_to_customer_order(make_ctx):
    ctx = make_ctx({
        "GetOrderAuthorDetails": {"data": None, "errors": [{"message": "Cannot query field wAuthorID"}]},
        "GetCustomerOrder": _conn("filterCustomerOrder", ORDER),
    })
    lookup = business.get_order_author_details(ctx.transport, "3202523")
    assert lookup.success
    assert lookup.attempted == ["order author query", "customer order query"]
    assert lookup.data["order"]["biId"] == "3202523"


def test_order_authors_not_found_lists_attempts(make_ctx):
    ctx = make_ctx({"GetOrderAuthorDetails": _conn("filterCustomerOrder"),
                    "GetCustomerOrder": _conn("filterCustomerOrder")})
    out = handlers.order_author_details(ctx, "1")
    assert out == ('Error: Order with ID "1" not found.\n\n'
                   "Attempted approaches: order author query, customer order query")


def test_order_authors_error_is_carried_into_message(make_ctx):
    ctx = make_ctx({"GetOrderAuthorDetails": {"errors": [{"message": "Cannot query field"}]},
                    "GetCustomerOrder": _conn("filterCustomerOrder")})
    lookup = business.get_order_author_details(ctx.transport, "1")
    assert not lookup.success
    assert lookup.message == "Could not retrieve author details for order 1: Cannot query field"


def test_format_order_authors_without_order():
    assert format_order_authors({}) == "No order data available in the response."


# ---------------- customer order / price proposal ----------------
def test_customer_order(make_ctx):
    ctx = make_ctx({"GetCustomerOrder": _conn("filterCustomerOrder", ORDER)})
    out = handlers.customer_order(ctx, "3202523")
    assert out.startswith("# Customer Order Details: 3202523")
    assert "- **Status**: Paid" in out
    assert "## Prices (1)" in out
    assert "- **APC**: 3000 USD" in out
    assert ctx.transport.calls[0]["variables"] == {"biId": "3202523"}


def test_customer_order_not_found(make_ctx):
    ctx = make_ctx({"GetCustomerOrder": _conn("filterCustomerOrder")})
    assert handlers.customer_order(ctx, "42") == 'Error: Customer order with ID "42" not found.'


def test_price_proposal_groups_parties_by_role(make_ctx):
    proposal = {
        "biId": "PP-7", "biName": "Proposal", "wAsWoaCode": "WOA1",
        "prRelatedParties": {"edges": [
            {"mapsOn": {"code": "AUTHOR"}, "node": AUTHOR},
            {"mapsOn": {"code": "AUTHOR"}, "node": {"uid": "u-2"}},
            {"mapsOn": {"code": "PAYER"}, "node": {"wEmail": "pay@example.org"}},
        ]},
    }
    ctx = make_ctx({"GetPriceProposal": _conn("filterWileyasPriceProposalCustomerOrder", proposal)})
    out = handlers.price_proposal(ctx, "PP-7")
    assert out.startswith("# Price Proposal Details: PP-7")
    assert "No prices found for this proposal." in out
    assert "## Related Parties (3)" in out
    assert "### AUTHOR (2)" in out
    assert "#### 1. a@example.org" in out
    assert "#### 2. u-2" in out
    assert "### PAYER (1)" in out
    assert "## Complete Data (JSON)" in out


def test_price_proposal_not_found(make_ctx):
    ctx = make_ctx({"GetPriceProposal": _conn("filterWileyasPriceProposalCustomerOrder")})
    assert handlers.price_proposal(ctx, "x") == 'Error: Price proposal with ID "x" not found.'


# ---------------- heartbeat ----------------
def test_business_heartbeat_reports_graphql_error(make_ctx):
    ctx = make_ctx({"Heartbeat": {"errors": [{"message": "Cannot query field _heartbeat"}]}})
    hb = business.check_heartbeat(ctx.transport)
    assert not hb.is_alive
    assert hb.error == "Cannot query field _heartbeat"
