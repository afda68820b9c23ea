from django.contrib import admin

from .models import Order, OrderItem, OrderNote


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


class OrderNoteInline(admin.TabularInline):
    model = OrderNote
    extra = 0
    readonly_fields = ("note", "created_at")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "payment_status", "total_amount", "currency", "payment_method", "transaction_ref", "created_at")
    search_fields = ("id", "transaction_ref", "customer_email", "customer_phone")
    list_filter = ("payment_status", "payment_method", "currency", "created_at")
    readonly_fields = ("created_at", "updated_at", "paid_at", "payment_metadata")
    inlines = (OrderItemInline, OrderNoteInline)
    ordering = ("-created_at",)
