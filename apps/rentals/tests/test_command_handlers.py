"""Unit tests for the rental command handlers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

import pytest

from apps.cars.models import Car
from apps.payments.gateway import CheckoutSession, PaymentGatewayError
from apps.payments.models import Payment
from apps.rentals.application.command_handlers import (
    CancelRentalCommand,
    CancelRentalHandler,
    FinalizePaymentCommand,
    FinalizePaymentHandler,
    InitiateRentalCommand,
    InitiateRentalHandler,
)
from apps.rentals.domain.events import RentalPaid, RentalReleased, RentalReserved
from apps.rentals.models import Rental
from apps.rentals.services import CarNotFoundError, RentalConflictError, RentalNotFoundError
from apps.users.models import User

pytestmark = pytest.mark.django_db


@pytest.fixture
def renter():
    return User.objects.create_user(email="renter@example.com", password="RenterPass123")


@pytest.fixture
def car():
    return Car.objects.create(
        brand="Tesla",
        model="Model 3",
        year=2023,
        price_per_day=Decimal("99.00"),
        is_available=True,
    )


@pytest.fixture
def gateway():
    gateway = mock.Mock()
    gateway.create_checkout_session.return_value = CheckoutSession(
        session_id="cs_test_42",
        checkout_url="https://checkout.stripe.com/c/pay/cs_test_42",
    )
    return gateway


def _command(renter, car, **overrides) -> InitiateRentalCommand:
    fields = {
        "user_id": renter.id,
        "car_id": car.id,
        "start_date": date(2024, 5, 10),
        "end_date": date(2024, 5, 12),
        "total_price": Decimal("198.00"),
    }
    fields.update(overrides)
    return InitiateRentalCommand(**fields)


def _published_events(callbacks):
    """Run captured on_commit callbacks and return what reached the bus."""
    with mock.patch("shared.application.message_bus.message_bus.publish_events") as publish:
        for callback in callbacks:
            callback()
    return [event for call in publish.call_args_list for event in call.args[0]]


def test_initiate_stores_pending_rental_with_session(renter, car, gateway, django_capture_on_commit_callbacks):
    handler = InitiateRentalHandler(gateway, frontend_url="https://shop.example/")

    with django_capture_on_commit_callbacks() as callbacks:
        result = handler.handle(_command(renter, car))

    rental = Rental.objects.get()
    assert result.rental.id == rental.id
    assert result.checkout_url == "https://checkout.stripe.com/c/pay/cs_test_42"
    assert rental.status == Rental.Status.PENDING
    assert rental.checkout_session_id == "cs_test_42"

    kwargs = gateway.create_checkout_session.call_args.kwargs
    assert kwargs["amount_cents"] == 19800
    assert kwargs["success_url"] == f"https://shop.example/payment-success/{rental.id}"
    assert kwargs["cancel_url"] == f"https://shop.example/payment-cancel/{rental.id}"

    events = _published_events(callbacks)
    assert [type(event) for event in events] == [RentalReserved]
    assert events[0].rental_id == rental.id
    assert events[0].checkout_session_id == "cs_test_42"


def test_charged_amount_matches_stored_and_paid_amounts(renter, car, gateway):
    handler = InitiateRentalHandler(gateway, frontend_url="https://shop.example")

    rental = handler.handle(_command(renter, car, total_price=Decimal("150.505"))).rental
    payment = FinalizePaymentHandler().handle(FinalizePaymentCommand(rental_id=rental.id))

    charged = Decimal(gateway.create_checkout_session.call_args.kwargs["amount_cents"]) / 100
    rental.refresh_from_db()
    assert charged == Decimal("150.51")
    assert rental.total_price == charged
    assert payment.amount == charged


def test_initiate_compensates_on_gateway_error(renter, car, gateway, django_capture_on_commit_callbacks):
    gateway.create_checkout_session.side_effect = PaymentGatewayError("card network down")
    handler = InitiateRentalHandler(gateway, frontend_url="https://shop.example")

    with django_capture_on_commit_callbacks() as callbacks:
        with pytest.raises(PaymentGatewayError, match="card network down"):
            handler.handle(_command(renter, car))

    assert Rental.objects.count() == 0
    events = _published_events(callbacks)
    assert [type(event) for event in events] == [RentalReleased]
    assert events[0].reason == "card network down"


def test_initiate_wraps_unexpected_errors(renter, car, gateway):
    gateway.create_checkout_session.side_effect = ValueError("bad payload")
    handler = InitiateRentalHandler(gateway, frontend_url="https://shop.example")

    with pytest.raises(PaymentGatewayError) as exc_info:
        handler.handle(_command(renter, car))

    assert isinstance(exc_info.value.__cause__, ValueError)
    assert Rental.objects.count() == 0


def test_initiate_rejects_unknown_car(renter, car, gateway):
    handler = InitiateRentalHandler(gateway, frontend_url="https://shop.example")

    with pytest.raises(CarNotFoundError):
        handler.handle(_command(renter, car, car_id=car.id + 100))

    gateway.create_checkout_session.assert_not_called()


def test_initiate_rejects_inverted_dates(renter, car, gateway):
    handler = InitiateRentalHandler(gateway, frontend_url="https://shop.example")

    with pytest.raises(ValueError):
        handler.handle(_command(renter, car, start_date=date(2024, 5, 12), end_date=date(2024, 5, 10)))

    assert Rental.objects.count() == 0


def test_double_booking_prevention_frees_slot_after_cancel(renter, car, gateway):
    handler = InitiateRentalHandler(gateway, frontend_url="https://shop.example", prevent_double_booking=True)
    first = handler.handle(_command(renter, car))

    with pytest.raises(RentalConflictError):
        handler.handle(_command(renter, car, start_date=date(2024, 5, 11), end_date=date(2024, 5, 13)))

    CancelRentalHandler().handle(CancelRentalCommand(rental_id=first.rental.id))
    second = handler.handle(_command(renter, car, start_date=date(2024, 5, 11), end_date=date(2024, 5, 13)))

    assert Rental.objects.get().id == second.rental.id


def test_finalize_creates_paid_stripe_payment(renter, car, gateway, django_capture_on_commit_callbacks):
    rental = InitiateRentalHandler(gateway, frontend_url="https://shop.example").handle(
        _command(renter, car)
    ).rental

    with django_capture_on_commit_callbacks() as callbacks:
        payment = FinalizePaymentHandler().handle(FinalizePaymentCommand(rental_id=rental.id))

    assert payment.amount == Decimal("198.00")
    assert payment.payment_method == Payment.Method.STRIPE
    assert payment.status == Payment.Status.PAID
    assert payment.transaction_id == "cs_test_42"
    rental.refresh_from_db()
    assert rental.status == Rental.Status.CONFIRMED

    events = _published_events(callbacks)
    assert [type(event) for event in events] == [RentalPaid]
    assert events[0].payment_id == payment.id


def test_finalize_unknown_rental():
    with pytest.raises(RentalNotFoundError):
        FinalizePaymentHandler().handle(FinalizePaymentCommand(rental_id=12345))

    assert Payment.objects.count() == 0


def test_cancel_removes_rental_and_payments(renter, car):
    rental = Rental.objects.create(
        user=renter,
        car=car,
        start_date=date(2024, 5, 10),
        end_date=date(2024, 5, 12),
        total_price=Decimal("198.00"),
    )
    for _ in range(2):
        Payment.objects.create(rental=rental, amount=Decimal("99.00"), payment_method="cash", status="completed")

    result = CancelRentalHandler().handle(CancelRentalCommand(rental_id=rental.id, cancelled_by=renter.id))

    assert result.rental_id == rental.id
    assert result.payments_removed == 2
    assert Rental.objects.count() == 0
    assert Payment.objects.count() == 0


def test_cancel_unknown_rental():
    with pytest.raises(RentalNotFoundError):
        CancelRentalHandler().handle(CancelRentalCommand(rental_id=12345))


def test_guarded_cancel_keeps_confirmed_rental(renter, car):
    rental = Rental.objects.create(
        user=renter,
        car=car,
        start_date=date(2024, 5, 10),
        end_date=date(2024, 5, 12),
        total_price=Decimal("198.00"),
        status=Rental.Status.CONFIRMED,
    )

    result = CancelRentalHandler().handle(CancelRentalCommand(rental_id=rental.id, only_if_abandoned=True))

    assert result is None
    assert Rental.objects.filter(pk=rental.id).exists()


def test_guarded_cancel_keeps_pending_rental_with_payment(renter, car):
    rental = Rental.objects.create(
        user=renter,
        car=car,
        start_date=date(2024, 5, 10),
        end_date=date(2024, 5, 12),
        total_price=Decimal("198.00"),
    )
    Payment.objects.create(rental=rental, amount=Decimal("198.00"), payment_method="cash", status="pending")

    result = CancelRentalHandler().handle(CancelRentalCommand(rental_id=rental.id, only_if_abandoned=True))

    assert result is None
    assert Payment.objects.filter(rental=rental).count() == 1


def test_guarded_cancel_removes_abandoned_rental(renter, car):
    rental = Rental.objects.create(
        user=renter,
        car=car,
        start_date=date(2024, 5, 10),
        end_date=date(2024, 5, 12),
        total_price=Decimal("198.00"),
    )

    result = CancelRentalHandler().handle(CancelRentalCommand(rental_id=rental.id, only_if_abandoned=True))

    assert result is not None
    assert result.payments_removed == 0
    assert not Rental.objects.filter(pk=rental.id).exists()
