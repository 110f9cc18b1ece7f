from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        "id_short",
        "project_title",
        "buyer_link",
        "status_badge",
        "amount_display",
        "transaction_id",
        "created_at",
    ]
    list_filter = ["status", "currency", "created_at"]
    search_fields = ["id", "transaction_id", "approved_transaction_id", "project_title", "buyer__email"]
    # Status and settlement fields are written by the payment service only
    readonly_fields = [
        "id",
        "buyer",
        "project",
        "amount",
        "currency",
        "status",
        "transaction_id",
        "approved_transaction_id",
        "gateway_logs",
        "paid_at",
        "created_at",
        "updated_at",
    ]

    def id_short(self, obj):
        return str(obj.id)[:8]

    id_short.short_description = "ID"

    def buyer_link(self, obj):
        url = reverse("admin:authentication_customuser_change", args=[obj.buyer_id])
        return format_html('<a href="{}">{}</a>', url, obj.buyer.email)

    buyer_link.short_description = "Buyer"

    def status_badge(self, obj):
        colors = {
            "paid": "green",
            "failed": "red",
            "pending": "orange",
            "processing": "orange",
            "refunded": "blue",
        }
        color = colors.get(obj.status, "black")
        return format_html('<span style="color: {}; font-weight: bold;">{}</span>', color, obj.get_status_display())

    status_badge.short_description = "Status"

    def amount_display(self, obj):
        return f"${obj.amount:.2f} {obj.currency}"

    amount_display.short_description = "Amount"
