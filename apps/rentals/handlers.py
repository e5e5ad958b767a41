"""Subscribers for rental domain events."""

from __future__ import annotations

import logging

from shared.application.message_bus import message_bus

from .domain.events import RentalCancelled, RentalPaid, RentalReleased, RentalReserved

audit_logger = logging.getLogger("apps.rentals.audit")


def log_rental_reserved(event: RentalReserved) -> None:
    audit_logger.info(
        f"rental_reserved rental={event.rental_id} car={event.car_id} user={event.user_id} "
        f"dates={event.dates} days={len(event.dates)} total={event.total_price} "
        f"session={event.checkout_session_id}"
    )


def log_rental_released(event: RentalReleased) -> None:
    audit_logger.warning(
        f"rental_released rental={event.rental_id} car={event.car_id} user={event.user_id} "
        f"reason={event.reason!r}"
    )


def log_rental_paid(event: RentalPaid) -> None:
    audit_logger.info(
        f"rental_paid rental={event.rental_id} payment={event.payment_id} "
        f"amount={event.amount} transaction={event.transaction_id or '-'}"
    )


def log_rental_cancelled(event: RentalCancelled) -> None:
    audit_logger.info(
        f"rental_cancelled rental={event.rental_id} car={event.car_id} user={event.user_id} "
        f"reason={event.reason} payments_removed={event.payments_removed} "
        f"by={event.cancelled_by if event.cancelled_by is not None else 'system'}"
    )


def register_event_handlers() -> None:
    message_bus.register_event_handler(RentalReserved, log_rental_reserved)
    message_bus.register_event_handler(RentalReleased, log_rental_released)
    message_bus.register_event_handler(RentalPaid, log_rental_paid)
    message_bus.register_event_handler(RentalCancelled, log_rental_cancelled)
