"""Shared BDD fixtures and step definitions for the marketplace."""

import pytest
from marketplace.exceptions import InvalidStateError
from marketplace.gateway import set_gateway
from marketplace.gateway.fake_adapter import TEST_SIGNATURE, FakeGateway
from marketplace.order.order import Order
from marketplace.payment.intent import CreatePaymentIntent
from marketplace.payment.webhook import handle_payment_outcome
from marketplace.product.product import Product
from marketplace.vendor.moderation import SuspendVendor
from marketplace.vendor.vendor import Vendor
from protean import current_domain
from pytest_bdd import given, parsers, then, when
from support import attempt, place_order, seed_address, seed_product, seed_vendor, webhook_payload

SHOPPER = "cust-bdd-001"


@pytest.fixture()
def market():
    """Everything the scenario has seeded, looked up by name."""
    return {"shopper": SHOPPER, "address": None, "vendors": {}, "products": {}, "order_id": None}


@pytest.fixture()
def outcome():
    """Container for the result or error of the last When step."""
    return {"result": None, "exc": None}


@pytest.fixture(autouse=True)
def fake_gateway(run_around_tests):
    gateway = FakeGateway()
    set_gateway(gateway)
    return gateway


def current_order(market) -> Order:
    return current_domain.repository_for(Order).get(market["order_id"])


def _lines(market, *pairs):
    return [(market["products"][name], quantity) for name, quantity in pairs]


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a shopper with a shipping address")
def _(market):
    market["address"] = seed_address(SHOPPER)


@given(parsers.cfparse('the store "{store}" sells "{name}" at {price:d} cents with {stock:d} in stock'))
def _(market, store, name, price, stock):
    if store not in market["vendors"]:
        market["vendors"][store] = seed_vendor(
            user_id=f"user-{store.lower().replace(' ', '-')}",
            store_name=store,
            commission_rate=10.0 if not market["vendors"] else 15.0,
        )
    market["products"][name] = seed_product(market["vendors"][store], name=name, price_cents=price, stock=stock)


@given(parsers.cfparse('the store "{store}" is suspended'))
def _(market, store):
    current_domain.process(SuspendVendor(vendor_id=str(market["vendors"][store].id)), asynchronous=False)


@given(parsers.cfparse('the shopper has placed an order for {qty_a:d} "{name_a}" and {qty_b:d} "{name_b}"'))
def _(market, qty_a, name_a, qty_b, name_b):
    order = place_order(SHOPPER, market["address"], _lines(market, (name_a, qty_a), (name_b, qty_b)))
    market["order_id"] = str(order.id)


@given("the payment for the order succeeded")
@when("the payment for the order succeeds")
def _(market):
    intent = current_domain.process(
        CreatePaymentIntent(order_id=market["order_id"], customer_id=SHOPPER),
        asynchronous=False,
    )
    handle_payment_outcome(
        webhook_payload("payment_intent.succeeded", intent["intent_id"], charge_id="ch_bdd"),
        TEST_SIGNATURE,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the shopper orders a cart of {qty_a:d} "{name_a}" and {qty_b:d} "{name_b}"'))
def _(market, outcome, qty_a, name_a, qty_b, name_b):
    attempt(outcome, lambda: place_order(SHOPPER, market["address"], _lines(market, (name_a, qty_a), (name_b, qty_b))))
    if outcome["result"] is not None:
        market["order_id"] = str(outcome["result"].id)


@when(parsers.cfparse('the shopper orders just {quantity:d} "{name}"'))
def _(market, outcome, quantity, name):
    attempt(outcome, lambda: place_order(SHOPPER, market["address"], _lines(market, (name, quantity))))
    if outcome["result"] is not None:
        market["order_id"] = str(outcome["result"].id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(market, status):
    assert current_order(market).status == status


@then(parsers.cfparse("the order total is {total:d} cents"))
def _(market, total):
    assert current_order(market).total_amount_cents == total


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(market, name, stock):
    assert current_domain.repository_for(Product).get(market["products"][name].id).stock == stock


@then(parsers.cfparse('"{store}" has been credited {cents:d} cents'))
def _(market, store, cents):
    vendor = current_domain.repository_for(Vendor).get(market["vendors"][store].id)
    assert vendor.total_revenue_cents == cents


@then("the action is refused because of the order state")
def _(outcome):
    assert isinstance(outcome["exc"], InvalidStateError), f"Unexpected outcome: {outcome}"


@then("no order was created")
def _(outcome):
    assert current_domain.repository_for(Order)._dao.query.all().total == 0
    assert outcome["result"] is None
