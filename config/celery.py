import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("car_rental")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Remove rentals whose checkout was abandoned - every hour
    "expire-abandoned-rentals": {
        "task": "rentals.expire_abandoned_rentals",
        "schedule": crontab(minute=30),
    },
}
