import copy
import json
import time
from contextlib import contextmanager
from dataclasses import dataclass, field

from orders.models import Order, OrderItem
from payments.exceptions import OrderNotFound
from payments.store import KeyedLock, OrderStore

TEST_TARAMONEY = {
    "TEST_MODE": True,
    "TEST_API_KEY": "sk_test_abcdef123",
    "TEST_BUSINESS_ID": "biz_test",
    "API_KEY": "sk_live_abcdef123",
    "BUSINESS_ID": "biz_live",
    "WEBHOOK_SECRET": "",
    "ENABLE_ORDER_LINKS": True,
    "ENABLE_MOBILE_MONEY": True,
    "BASE_URL": "https://tara.example/api/tara",
    "SITE_URL": "https://shop.example",
    "RETURN_URL": "https://shop.example/checkout/order-received",
}


def tara_settings(**overrides):
    return {**TEST_TARAMONEY, **overrides}


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


def make_order(total=5000, items=(("Widget", 1, ""),), **fields):
    order = Order.objects.create(total_amount=total, **fields)
    for name, qty, image in items:
        OrderItem.objects.create(order=order, name=name, quantity=qty, image_url=image)
    return order


@dataclass
class FakeItem:
    name: str
    quantity: int = 1
    image_url: str = ""


@dataclass
class FakeOrder:
    pk: int
    payment_status: str = Order.STATUS_PENDING
    total_amount: int = 5000
    payment_method: str = ""
    transaction_ref: str = ""
    payment_metadata: dict = field(default_factory=dict)
    items: list = field(default_factory=list)
    notes: list = field(default_factory=list)

    def line_items(self):
        return list(self.items)


class InMemoryOrderStore(OrderStore):
    """Dict-backed store honouring the ``locked`` contract; ``delay`` widens race windows."""

    def __init__(self, orders=(), delay=0.0):
        self.orders = {o.pk: o for o in orders}
        self.delay = delay
        self.lookups = 0
        self.saves = 0
        self._locks = KeyedLock()

    def get_order(self, order_id):
        self.lookups += 1
        try:
            return self.orders[order_id]
        except KeyError:
            raise OrderNotFound(order_id)

    def save(self, order):
        self.saves += 1

    def set_status(self, order, status, note=""):
        if self.delay:
            time.sleep(self.delay)
        order.payment_status = status
        if note:
            self.add_note(order, note)

    def mark_paid(self, order, transaction_ref):
        if self.delay:
            time.sleep(self.delay)
        order.payment_status = Order.STATUS_PROCESSING
        order.transaction_ref = transaction_ref

    def add_note(self, order, note):
        order.notes.append(note)

    def find_order_by_meta(self, key, value):
        self.lookups += 1
        for order in self.orders.values():
            if order.payment_metadata.get(key) == value:
                return order.pk
        return None

    def exists(self, order_id) -> bool:
        self.lookups += 1
        return order_id in self.orders

    @contextmanager
    def locked(self, order_id):
        with self._locks.hold(order_id):
            order = self.get_order(order_id)
            yield order

    def snapshot(self, order_id):
        return copy.deepcopy(self.orders[order_id])
