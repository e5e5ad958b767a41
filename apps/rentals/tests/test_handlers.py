"""Tests for rental event subscribers."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from apps.rentals.domain.events import RentalCancelled, RentalPaid, RentalReserved
from apps.rentals.handlers import log_rental_cancelled, log_rental_paid
from shared.application.message_bus import message_bus
from shared.domain.value_objects import DateRange, Money


def test_subscribers_are_registered_on_startup():
    for event_type in (RentalReserved, RentalPaid, RentalCancelled):
        assert message_bus.handlers_for(event_type), event_type.__name__


def test_paid_event_is_audited(caplog):
    event = RentalPaid(aggregate_id=5, rental_id=5, payment_id=9, amount=Money(Decimal("80.00")))

    with caplog.at_level(logging.INFO, logger="apps.rentals.audit"):
        log_rental_paid(event)

    assert "rental_paid rental=5 payment=9" in caplog.text


def test_cancelled_event_without_actor_is_attributed_to_system(caplog):
    event = RentalCancelled(
        aggregate_id=5,
        rental_id=5,
        car_id=2,
        user_id=3,
        reason="checkout_expired",
    )

    with caplog.at_level(logging.INFO, logger="apps.rentals.audit"):
        log_rental_cancelled(event)

    assert "by=system" in caplog.text


def test_reserved_event_carries_dates():
    event = RentalReserved(
        aggregate_id=1,
        rental_id=1,
        car_id=2,
        user_id=3,
        dates=DateRange(date(2024, 6, 1), date(2024, 6, 4)),
        total_price=Money(Decimal("150.50")),
        checkout_session_id="cs_test_1",
    )

    assert len(event.dates) == 3
    assert event.to_dict()["event_type"] == "RentalReserved"
