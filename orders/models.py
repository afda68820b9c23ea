from django.db import models


class Order(models.Model):
    STATUS_NO_PAYMENT = "no_payment"
    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_COMPLETED = "completed"
    STATUS_FAILED = "failed"
    STATUS = [
        (STATUS_NO_PAYMENT, "No payment"),
        (STATUS_PENDING, "Pending payment"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_FAILED, "Failed"),
    ]

    # minor currency units; the provider only accepts integers
    total_amount = models.PositiveBigIntegerField(default=0)
    currency = models.CharField(max_length=8, default="XAF")
    payment_status = models.CharField(max_length=16, choices=STATUS, default=STATUS_NO_PAYMENT, db_index=True)
    payment_method = models.CharField(max_length=32, blank=True, default="")
    transaction_ref = models.CharField(max_length=128, blank=True, default="", db_index=True)
    payment_metadata = models.JSONField(default=dict, blank=True)

    customer_email = models.EmailField(blank=True, default="")
    customer_phone = models.CharField(max_length=20, blank=True, default="")

    paid_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_paid(self) -> bool:
        return self.payment_status in (self.STATUS_PROCESSING, self.STATUS_COMPLETED)

    def line_items(self):
        return list(self.items.order_by("pk"))

    def __str__(self):
        return f"Order #{self.pk} ({self.payment_status})"


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    image_url = models.URLField(blank=True, default="")

    def __str__(self):
        return f"{self.name} x {self.quantity}"


class OrderNote(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="notes")
    note = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("pk",)

    def __str__(self):
        return self.note[:60]
