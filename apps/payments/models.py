"""Payment ledger models."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Payment(models.Model):
    """A payment recorded against a rental."""

    class Method(models.TextChoices):
        CREDIT_CARD = "credit_card", _("Credit card")
        PAYPAL = "paypal", _("PayPal")
        CASH = "cash", _("Cash")
        STRIPE = "stripe", _("Stripe checkout")

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        COMPLETED = "completed", _("Completed")
        FAILED = "failed", _("Failed")
        PAID = "paid", _("Paid")

    rental = models.ForeignKey(
        "rentals.Rental",
        on_delete=models.CASCADE,
        related_name="payments",
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    payment_method = models.CharField(max_length=20, choices=Method.choices)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    transaction_id = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("Checkout session id reported by the payment processor."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Payment for rental {self.rental_id} ({self.status})"
