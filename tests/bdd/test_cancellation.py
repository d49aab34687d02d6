"""BDD tests for order cancellation."""

from marketplace.order.cancellation import CancelOrder
from marketplace.order.fulfillment import UpdateItemStatus
from marketplace.order.order import Order
from protean import current_domain
from pytest_bdd import given, scenarios, when
from support import attempt, reload

scenarios("features/cancellation.feature")


@given("every vendor has shipped its items")
def _(market):
    for status in ("PROCESSING", "SHIPPED"):
        for item in reload(Order, market["order_id"]).items:
            current_domain.process(
                UpdateItemStatus(item_id=str(item.id), vendor_id=str(item.vendor_id), status=status),
                asynchronous=False,
            )


@when("the shopper cancels the order")
def _(market, outcome):
    attempt(
        outcome,
        lambda: current_domain.process(
            CancelOrder(order_id=market["order_id"], customer_id=market["shopper"]),
            asynchronous=False,
        ),
    )
