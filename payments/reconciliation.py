import enum

from orders.models import Order

from .store import TERMINAL_SUCCESS

TRANSACTION_META = "_taramoney_transaction_id"


class ApplyResult(str, enum.Enum):
    APPLIED = "applied"
    DUPLICATE = "duplicate"
    CONFLICT_IGNORED = "conflict_ignored"


class ReconciliationEngine:
    """Applies a canonical webhook outcome to an order exactly once.

    ``pending`` (or an order that never got that far) moves to
    ``processing`` on success or ``failed`` on failure. Orders already in
    ``processing``/``completed``/``failed`` are never touched again: a
    redelivery of the same outcome is a duplicate, a disagreeing one is
    ignored. Success is never retracted.

    The whole read-decide-write runs inside ``store.locked`` so concurrent
    deliveries for one order are serialized.
    """

    def __init__(self, store, logger, label="TaraMoney"):
        self.store = store
        self.logger = logger
        self.label = label

    def apply(self, order_id, outcome) -> ApplyResult:
        with self.store.locked(order_id) as order:
            status = order.payment_status
            if outcome.succeeded:
                if status in TERMINAL_SUCCESS:
                    self.logger.info("Order already processed", {"order_id": order_id})
                    return ApplyResult.DUPLICATE
                if status == Order.STATUS_FAILED:
                    self.logger.warning(
                        "Success received for failed order; left for manual review",
                        {"order_id": order_id, "transaction_id": outcome.transaction_ref},
                    )
                    return ApplyResult.CONFLICT_IGNORED
                self._complete(order, outcome)
            else:
                if status in TERMINAL_SUCCESS:
                    self.logger.warning(
                        "Failure received for paid order; ignored",
                        {"order_id": order_id, "status": outcome.status},
                    )
                    return ApplyResult.CONFLICT_IGNORED
                if status == Order.STATUS_FAILED:
                    self.logger.info("Order already failed", {"order_id": order_id})
                    return ApplyResult.DUPLICATE
                self._fail(order, outcome)
        return ApplyResult.APPLIED

    def _complete(self, order, outcome):
        ref = outcome.transaction_ref
        order.payment_metadata = {**(order.payment_metadata or {}), TRANSACTION_META: ref}
        self.store.mark_paid(order, ref)
        self.store.add_note(order, f"{self.label} payment completed. Transaction ID: {ref}")
        self.store.save(order)
        self.logger.info("Payment completed successfully", {"order_id": order.pk, "transaction_id": ref})

    def _fail(self, order, outcome):
        status = outcome.status or "FAILED"
        self.store.set_status(order, Order.STATUS_FAILED, f"{self.label} payment failed. Status: {status}")
        self.store.save(order)
        self.logger.error("Payment failed", {"order_id": order.pk, "status": status})
