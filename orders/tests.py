from django.test import TestCase

from .models import Order, OrderItem


class OrderModelTests(TestCase):
    def test_is_paid_covers_processing_and_completed(self):
        order = Order.objects.create(total_amount=100)
        self.assertFalse(order.is_paid)
        for status, paid in ((Order.STATUS_PENDING, False), (Order.STATUS_PROCESSING, True),
                             (Order.STATUS_COMPLETED, True), (Order.STATUS_FAILED, False)):
            order.payment_status = status
            self.assertEqual(order.is_paid, paid)

    def test_line_items_in_insertion_order(self):
        order = Order.objects.create(total_amount=100)
        OrderItem.objects.create(order=order, name="B")
        OrderItem.objects.create(order=order, name="A", quantity=2)
        self.assertEqual([str(i) for i in order.line_items()], ["B x 1", "A x 2"])

    def test_defaults(self):
        order = Order.objects.create()
        self.assertEqual(order.payment_status, Order.STATUS_NO_PAYMENT)
        self.assertEqual(order.payment_metadata, {})
