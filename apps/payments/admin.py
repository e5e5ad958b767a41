"""Admin registration for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "rental", "amount", "payment_method", "status", "created_at")
    list_filter = ("payment_method", "status")
    search_fields = ("transaction_id", "rental__user__email")
    readonly_fields = ("created_at", "updated_at")
