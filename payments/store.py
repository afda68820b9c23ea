import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import contextmanager

from django.db import transaction
from django.utils import timezone

from orders.models import Order, OrderNote

from .exceptions import OrderNotFound

TERMINAL_SUCCESS = (Order.STATUS_PROCESSING, Order.STATUS_COMPLETED)
TERMINAL = TERMINAL_SUCCESS + (Order.STATUS_FAILED,)


class KeyedLock:
    """One re-entrant lock per key; entries are dropped when nobody holds them."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}
        self._users = defaultdict(int)

    @contextmanager
    def hold(self, key):
        with self._guard:
            lock = self._locks.setdefault(key, threading.RLock())
            self._users[key] += 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[key] -= 1
                if not self._users[key]:
                    del self._users[key]
                    del self._locks[key]


class OrderStore(ABC):
    """What the payment core may do to an order, and nothing more."""

    @abstractmethod
    def get_order(self, order_id): ...

    @abstractmethod
    def save(self, order): ...

    @abstractmethod
    def set_status(self, order, status, note=""): ...

    @abstractmethod
    def mark_paid(self, order, transaction_ref): ...

    @abstractmethod
    def add_note(self, order, note): ...

    @abstractmethod
    def find_order_by_meta(self, key, value): ...

    @abstractmethod
    def exists(self, order_id) -> bool: ...

    @abstractmethod
    def locked(self, order_id):
        """Context manager yielding a fresh copy of the order.

        Nothing else can read-decide-write the same order until it exits.
        """


_process_locks = KeyedLock()


class DjangoOrderStore(OrderStore):
    def __init__(self, locks: KeyedLock = None):
        self.locks = locks or _process_locks

    def get_order(self, order_id):
        try:
            return Order.objects.get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise OrderNotFound(order_id)

    def save(self, order):
        order.save()

    def set_status(self, order, status, note=""):
        order.payment_status = status
        order.save(update_fields=["payment_status", "payment_metadata", "payment_method", "updated_at"])
        if note:
            self.add_note(order, note)

    def mark_paid(self, order, transaction_ref):
        order.payment_status = Order.STATUS_PROCESSING
        order.transaction_ref = transaction_ref or ""
        order.paid_at = timezone.now()
        order.save()

    def add_note(self, order, note):
        OrderNote.objects.create(order=order, note=note)

    def find_order_by_meta(self, key, value):
        # JSONField key lookups are portable across sqlite and postgres
        return (
            Order.objects.filter(**{f"payment_metadata__{key}": value})
            .order_by("-pk")
            .values_list("pk", flat=True)
            .first()
        )

    def exists(self, order_id) -> bool:
        return Order.objects.filter(pk=order_id).exists()

    @contextmanager
    def locked(self, order_id):
        with self.locks.hold(str(order_id)), transaction.atomic():
            try:
                order = Order.objects.select_for_update().get(pk=order_id)
            except (Order.DoesNotExist, ValueError, TypeError):
                raise OrderNotFound(order_id)
            yield order
