"""
Rental Command Handlers

These are the use cases of the booking transaction.
They orchestrate the rental ledger, the payment ledger and the
payment processor.

Commands:
- InitiateRentalCommand: Reserve a car and open a checkout session
- FinalizePaymentCommand: Record a successful checkout
- CancelRentalCommand: Drop a rental together with its payments
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional
import logging

from django.conf import settings

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import DateRange, Money, DEFAULT_CURRENCY
from apps.payments.gateway import PaymentGateway, PaymentGatewayError, get_payment_gateway
from apps.payments.models import Payment
from apps.rentals.domain.events import (
    RentalCancelled,
    RentalPaid,
    RentalReleased,
    RentalReserved,
)
from apps.rentals.models import Rental
from apps.rentals.services import (
    build_callback_urls,
    ensure_car_is_available,
    get_car,
    get_rental,
)

logger = logging.getLogger(__name__)

DEFAULT_CHECKOUT_DESCRIPTION = 'Car Rental'


# ===== Commands =====

@dataclass
class InitiateRentalCommand:
    """
    Command to start a rental

    Amounts and dates are expected to be validated by the caller;
    the handler only re-checks what the database would reject.
    """
    user_id: int
    car_id: int
    start_date: date
    end_date: date
    total_price: Decimal


@dataclass
class FinalizePaymentCommand:
    """Command issued when the processor redirects back after payment"""
    rental_id: int


@dataclass
class CancelRentalCommand:
    """
    Command to delete a rental

    With only_if_abandoned the rental is kept unless it is still pending
    and has no payments when its row is locked.
    """
    rental_id: int
    reason: str = 'checkout_cancelled'
    cancelled_by: Optional[int] = None
    only_if_abandoned: bool = False


# ===== Results =====

@dataclass(frozen=True)
class InitiatedRental:
    rental: Rental
    checkout_url: str


@dataclass(frozen=True)
class CancelledRental:
    rental_id: int
    payments_removed: int


# ===== Command Handlers =====

class InitiateRentalHandler:
    """
    Handler for InitiateRental command

    The processor call never runs inside a database transaction:
    1. Transaction: (optionally lock the car and check overlaps) and
       insert the pending rental
    2. No transaction: open the checkout session
    3. Transaction: store the checkout session id on the rental

    If step 2 fails for any reason the rental from step 1 is deleted in
    a compensating transaction and PaymentGatewayError is raised.
    """

    def __init__(
        self,
        gateway: PaymentGateway,
        *,
        frontend_url: str,
        prevent_double_booking: bool = False,
        description: str = DEFAULT_CHECKOUT_DESCRIPTION,
        currency: str = DEFAULT_CURRENCY,
    ):
        self.gateway = gateway
        self.frontend_url = frontend_url
        self.prevent_double_booking = prevent_double_booking
        self.description = description
        self.currency = currency

    @classmethod
    def from_settings(cls) -> 'InitiateRentalHandler':
        options = getattr(settings, 'RENTALS', {})
        return cls(
            get_payment_gateway(),
            frontend_url=settings.FRONTEND_URL,
            prevent_double_booking=bool(options.get('PREVENT_DOUBLE_BOOKING', False)),
            description=options.get('CHECKOUT_DESCRIPTION', DEFAULT_CHECKOUT_DESCRIPTION),
        )

    def handle(self, command: InitiateRentalCommand) -> InitiatedRental:
        """
        Handle rental initiation

        Returns: the stored rental and the hosted checkout URL

        Raises:
            CarNotFoundError: the car does not exist
            RentalConflictError: double booking prevention is on and
                the car is taken for an overlapping period
            PaymentGatewayError: the checkout session could not be opened
            ValueError: invalid dates or a negative price
        """
        dates = DateRange(command.start_date, command.end_date)
        price = Money(command.total_price, self.currency)

        logger.info(
            f"Initiating rental of car {command.car_id} for user {command.user_id}, "
            f"dates {dates}, total {price}"
        )

        rental = self._reserve(command, dates, price)
        success_url, cancel_url = build_callback_urls(self.frontend_url, rental.id)

        try:
            session = self.gateway.create_checkout_session(
                amount_cents=price.to_minor_units(),
                currency=price.currency,
                description=self.description,
                success_url=success_url,
                cancel_url=cancel_url,
                metadata={'rental_id': rental.id, 'user_id': command.user_id},
            )
        except Exception as e:
            logger.error(f"Checkout session for rental {rental.id} failed: {e}", exc_info=True)
            self._release(rental, reason=str(e))
            if isinstance(e, PaymentGatewayError):
                raise
            raise PaymentGatewayError(str(e)) from e

        with DjangoUnitOfWork() as uow:
            rental.checkout_session_id = session.session_id
            rental.save(update_fields=['checkout_session_id', 'updated_at'])
            uow.record(RentalReserved(
                aggregate_id=rental.id,
                rental_id=rental.id,
                car_id=rental.car_id,
                user_id=rental.user_id,
                dates=dates,
                total_price=price,
                checkout_session_id=session.session_id,
            ))

        logger.info(f"Rental {rental.id} awaiting payment in session {session.session_id}")
        return InitiatedRental(rental=rental, checkout_url=session.checkout_url)

    def _reserve(self, command: InitiateRentalCommand, dates: DateRange, price: Money) -> Rental:
        with DjangoUnitOfWork():
            car = get_car(command.car_id, lock=self.prevent_double_booking)
            if self.prevent_double_booking:
                ensure_car_is_available(car, dates)

            return Rental.objects.create(
                user_id=command.user_id,
                car=car,
                start_date=dates.start_date,
                end_date=dates.end_date,
                total_price=price.amount,
                status=Rental.Status.PENDING,
            )

    def _release(self, rental: Rental, *, reason: str) -> None:
        with DjangoUnitOfWork() as uow:
            Rental.objects.filter(pk=rental.pk).delete()
            uow.record(RentalReleased(
                aggregate_id=rental.id,
                rental_id=rental.id,
                car_id=rental.car_id,
                user_id=rental.user_id,
                reason=reason,
            ))
        logger.warning(f"Released rental {rental.id} after checkout failure")


class FinalizePaymentHandler:
    """
    Handler for FinalizePayment command

    Records a paid Stripe payment for the full rental price and marks
    the rental confirmed. Every call records a new payment.
    """

    def handle(self, command: FinalizePaymentCommand) -> Payment:
        """
        Raises:
            RentalNotFoundError: no rental with that id
        """
        with DjangoUnitOfWork() as uow:
            rental = get_rental(command.rental_id, lock=True)

            payment = Payment.objects.create(
                rental=rental,
                amount=rental.total_price,
                payment_method=Payment.Method.STRIPE,
                status=Payment.Status.PAID,
                transaction_id=rental.checkout_session_id,
            )
            rental.mark_confirmed()

            uow.record(RentalPaid(
                aggregate_id=rental.id,
                rental_id=rental.id,
                payment_id=payment.id,
                amount=Money(payment.amount),
                transaction_id=payment.transaction_id,
            ))

        logger.info(f"Payment {payment.id} recorded for rental {rental.id}: {payment.amount}")
        return payment


class CancelRentalHandler:
    """Handler for CancelRental command"""

    def handle(self, command: CancelRentalCommand) -> Optional[CancelledRental]:
        """
        Delete the rental; its payments go with it.

        Returns None when only_if_abandoned is set and the rental has
        been paid or confirmed in the meantime.

        Raises:
            RentalNotFoundError: no rental with that id
        """
        with DjangoUnitOfWork() as uow:
            rental = get_rental(command.rental_id, lock=True)
            rental_id = rental.id
            payments_removed = rental.payments.count()

            if command.only_if_abandoned and (
                rental.status != Rental.Status.PENDING or payments_removed
            ):
                logger.info(
                    f"Rental {rental_id} kept: {rental.status} with {payments_removed} payment(s)"
                )
                return None

            rental.delete()

            uow.record(RentalCancelled(
                aggregate_id=rental_id,
                rental_id=rental_id,
                car_id=rental.car_id,
                user_id=rental.user_id,
                reason=command.reason,
                payments_removed=payments_removed,
                cancelled_by=command.cancelled_by,
            ))

        logger.info(
            f"Rental {rental_id} cancelled ({command.reason}), "
            f"{payments_removed} payment(s) removed"
        )
        return CancelledRental(rental_id=rental_id, payments_removed=payments_removed)
