"""Celery tasks for the rentals domain."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from .application.command_handlers import CancelRentalCommand, CancelRentalHandler
from .models import Rental
from .services import RentalNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_PENDING_TTL_MINUTES = 24 * 60


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="rentals.expire_abandoned_rentals")
def expire_abandoned_rentals() -> dict[str, int]:
    """
    Delete pending rentals whose checkout was never completed.

    A rental is abandoned when it is still pending, has no payments
    and was created more than ``RENTALS["PENDING_TTL_MINUTES"]`` ago.

    Returns:
        dict: {"expired": number of rentals deleted}
    """
    ttl = int(getattr(settings, "RENTALS", {}).get("PENDING_TTL_MINUTES", DEFAULT_PENDING_TTL_MINUTES))
    cutoff = timezone.now() - timedelta(minutes=ttl)

    stale_ids = list(
        Rental.objects.filter(
            status=Rental.Status.PENDING,
            created_at__lt=cutoff,
            payments__isnull=True,
        )
        .values_list("id", flat=True)
        .distinct()
    )

    handler = CancelRentalHandler()
    expired = 0
    for rental_id in stale_ids:
        try:
            result = handler.handle(
                CancelRentalCommand(rental_id=rental_id, reason="checkout_expired", only_if_abandoned=True)
            )
        except RentalNotFoundError:
            # Removed by a callback in the meantime.
            continue
        if result is not None:
            expired += 1

    if expired:
        logger.info(f"Expired {expired} abandoned rental(s) older than {ttl} minutes")

    return {"expired": expired}
