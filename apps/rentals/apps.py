from django.apps import AppConfig


class RentalsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.rentals"
    verbose_name = "Rentals"

    def ready(self):
        from .handlers import register_event_handlers

        register_event_handlers()
