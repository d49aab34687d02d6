"""Status reconciliation sweep: re-derive every live order's status.

Admin maintenance operation. Pages through all non-cancelled orders and
dispatches ``ResyncOrderStatus`` for each, so every order is corrected in its
own Unit of Work and one failure does not abort the sweep. Running it again
immediately is a no-op.
"""

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError, InvalidOperationError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.config import setting
from marketplace.domain import marketplace
from marketplace.order.order import Order
from marketplace.order.status import OrderStatus

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class ResyncOrderStatus:
    order_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class ResyncAllOrderStatuses:
    """Re-derive the aggregate status of every non-cancelled order."""

    batch_size = Integer(min_value=1)


def _live_order_ids(batch_size):
    dao = current_domain.repository_for(Order)._dao
    offset = 0
    while True:
        page = (
            dao.query.exclude(status=OrderStatus.CANCELLED.value)
            .order_by("created_at")
            .offset(offset)
            .limit(batch_size)
            .all()
            .items
        )
        for order in page:
            yield str(order.id)
        if len(page) < batch_size:
            return
        offset += batch_size


@marketplace.command_handler(part_of=Order)
class ReconciliationHandler:
    @handle(ResyncOrderStatus)
    def resync_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status

        if not order.resync_status():
            return False

        repo.add(order)
        logger.info(
            "Order status resynced",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
        )
        return True

    @handle(ResyncAllOrderStatuses)
    def resync_all_order_statuses(self, command):
        batch_size = command.batch_size or setting("resync_batch_size")
        order_ids = list(_live_order_ids(batch_size))

        logger.info("Resyncing order statuses", order_count=len(order_ids))

        synced = 0
        for order_id in order_ids:
            try:
                changed = current_domain.process(
                    ResyncOrderStatus(order_id=order_id),
                    asynchronous=False,
                )
            except (ValidationError, InvalidOperationError, ExpectedVersionError) as exc:
                logger.warning(
                    "Failed to resync order status",
                    order_id=order_id,
                    error=str(exc),
                )
                continue
            if changed:
                synced += 1

        logger.info("Order status resync complete", synced=synced, scanned=len(order_ids))
        return {"synced": synced}
