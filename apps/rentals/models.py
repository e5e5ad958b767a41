"""Rental ledger models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Rental(models.Model):
    """A car reserved by a user for a date range."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Awaiting payment")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")

    # Statuses that keep the car occupied for overlap checks.
    BLOCKING_STATUSES = (Status.PENDING, Status.CONFIRMED)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="rentals",
    )
    car = models.ForeignKey(
        "cars.Car",
        on_delete=models.CASCADE,
        related_name="rentals",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    total_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    checkout_session_id = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("Hosted checkout session opened for this rental."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Rental")
        verbose_name_plural = _("Rentals")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="rental_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(total_price__gte=0),
                name="rental_total_price_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["car", "start_date", "end_date"], name="rental_car_dates_idx"),
            models.Index(fields=["status"], name="rental_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Rental #{self.pk} of car {self.car_id} ({self.status})"

    def mark_confirmed(self) -> None:
        self.status = self.Status.CONFIRMED
        self.save(update_fields=["status", "updated_at"])
