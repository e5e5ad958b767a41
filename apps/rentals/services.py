"""Domain services for rental workflows."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.cars.models import Car
from shared.domain.value_objects import DateRange

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .models import Rental


class RentalNotFoundError(Exception):
    """Raised when a rental id does not resolve to a stored rental."""


class CarNotFoundError(Exception):
    """Raised when a rental names a car that does not exist."""


class RentalConflictError(Exception):
    """Raised when a car is busy for requested dates."""


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def get_car(car_id, *, lock: bool = False) -> Car:
    queryset = Car.objects.all()
    if lock:
        queryset = _lock_queryset_if_possible(queryset)
    try:
        return queryset.get(pk=car_id)
    except Car.DoesNotExist:
        raise CarNotFoundError(f"Car {car_id} not found")


def get_rental(rental_id, *, lock: bool = False) -> "Rental":
    from .models import Rental  # Local import to prevent circular dependency

    queryset = Rental.objects.select_related("car", "user")
    if lock:
        queryset = _lock_queryset_if_possible(queryset)
    try:
        return queryset.get(pk=rental_id)
    except (Rental.DoesNotExist, ValueError, TypeError):
        raise RentalNotFoundError(f"Rental {rental_id} not found")


def ensure_car_is_available(car, dates: DateRange) -> None:
    """Ensure no pending or confirmed rental of the car overlaps the period.

    Ranges are end-exclusive, so back-to-back rentals do not conflict.
    """

    from .models import Rental

    rentals_qs = Rental.objects.filter(
        car=car,
        status__in=Rental.BLOCKING_STATUSES,
    ).filter(Q(start_date__lt=dates.end_date) & Q(end_date__gt=dates.start_date))

    rentals_qs = _lock_queryset_if_possible(rentals_qs)

    if rentals_qs.exists():
        raise RentalConflictError("Car is not available for the selected dates.")


def build_callback_urls(frontend_url: str, rental_id: int) -> tuple[str, str]:
    """Success and cancel redirect targets for a rental's checkout."""

    base = frontend_url.rstrip("/")
    return (
        f"{base}/payment-success/{rental_id}",
        f"{base}/payment-cancel/{rental_id}",
    )
