"""
Rental Domain Events

Events that represent things that have happened to a rental.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from typing import Optional

from shared.domain.base import DomainEvent
from shared.domain.value_objects import Money, DateRange


# ===== Rental Events =====

@dataclass(kw_only=True)
class RentalReserved(DomainEvent):
    """
    Event: A pending rental was created and its checkout session opened

    Triggers:
    - Audit log entry
    """
    rental_id: int
    car_id: int
    user_id: int
    dates: DateRange
    total_price: Money
    checkout_session_id: str


@dataclass(kw_only=True)
class RentalReleased(DomainEvent):
    """
    Event: A pending rental was removed because checkout could not be opened
    """
    rental_id: int
    car_id: int
    user_id: int
    reason: str


@dataclass(kw_only=True)
class RentalPaid(DomainEvent):
    """
    Event: The processor redirected back after a successful checkout

    Triggers:
    - Audit log entry
    """
    rental_id: int
    payment_id: int
    amount: Money
    transaction_id: str = ''


@dataclass(kw_only=True)
class RentalCancelled(DomainEvent):
    """
    Event: A rental and its payments were deleted
    """
    rental_id: int
    car_id: int
    user_id: int
    reason: str
    payments_removed: int = 0
    cancelled_by: Optional[int] = None
