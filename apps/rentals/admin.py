from django.contrib import admin

from apps.payments.models import Payment
from .models import Rental


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ("amount", "payment_method", "status", "transaction_id", "created_at")


@admin.register(Rental)
class RentalAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "car", "start_date", "end_date", "total_price", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("user__email", "car__brand", "car__model", "checkout_session_id")
    readonly_fields = ("checkout_session_id", "created_at", "updated_at")
    inlines = [PaymentInline]
