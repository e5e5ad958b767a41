"""Tests for periodic rental maintenance tasks."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

import pytest
from django.utils import timezone

from apps.cars.models import Car
from apps.payments.models import Payment
from apps.rentals.application.command_handlers import (
    CancelRentalHandler,
    FinalizePaymentCommand,
    FinalizePaymentHandler,
)
from apps.rentals.models import Rental
from apps.rentals.tasks import expire_abandoned_rentals
from apps.users.models import User

pytestmark = pytest.mark.django_db


def _rental(user, car, *, age: timedelta, status=Rental.Status.PENDING) -> Rental:
    rental = Rental.objects.create(
        user=user,
        car=car,
        start_date=date(2024, 10, 1),
        end_date=date(2024, 10, 2),
        total_price=Decimal("30.00"),
        status=status,
    )
    Rental.objects.filter(pk=rental.pk).update(created_at=timezone.now() - age)
    return rental


def test_expire_abandoned_rentals(settings):
    settings.RENTALS = {"PREVENT_DOUBLE_BOOKING": False, "PENDING_TTL_MINUTES": 60}
    user = User.objects.create_user(email="renter@example.com", password="RenterPass123")
    car = Car.objects.create(brand="Fiat", model="500", year=2018, price_per_day=Decimal("30.00"), is_available=True)

    abandoned = _rental(user, car, age=timedelta(hours=2))
    fresh = _rental(user, car, age=timedelta(minutes=5))
    confirmed = _rental(user, car, age=timedelta(hours=2), status=Rental.Status.CONFIRMED)
    paid = _rental(user, car, age=timedelta(hours=2))
    Payment.objects.create(rental=paid, amount=Decimal("30.00"), payment_method="cash", status="pending")

    result = expire_abandoned_rentals()

    assert result == {"expired": 1}
    remaining = set(Rental.objects.values_list("id", flat=True))
    assert abandoned.id not in remaining
    assert remaining == {fresh.id, confirmed.id, paid.id}


def test_expiry_keeps_rental_paid_while_task_runs(settings):
    settings.RENTALS = {"PREVENT_DOUBLE_BOOKING": False, "PENDING_TTL_MINUTES": 60}
    user = User.objects.create_user(email="renter@example.com", password="RenterPass123")
    car = Car.objects.create(brand="Fiat", model="Panda", year=2019, price_per_day=Decimal("25.00"), is_available=True)
    rental = _rental(user, car, age=timedelta(hours=2))

    original_handle = CancelRentalHandler.handle

    def paid_just_before_cancel(self, command):
        FinalizePaymentHandler().handle(FinalizePaymentCommand(rental_id=command.rental_id))
        return original_handle(self, command)

    with mock.patch.object(CancelRentalHandler, "handle", autospec=True, side_effect=paid_just_before_cancel):
        result = expire_abandoned_rentals()

    assert result == {"expired": 0}
    rental.refresh_from_db()
    assert rental.status == Rental.Status.CONFIRMED
    assert Payment.objects.filter(rental=rental).count() == 1
