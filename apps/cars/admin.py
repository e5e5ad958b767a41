"""Admin registration for the car catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Car


@admin.register(Car)
class CarAdmin(admin.ModelAdmin):
    list_display = ("brand", "model", "year", "price_per_day", "is_available", "created_at")
    list_filter = ("is_available", "brand", "year")
    search_fields = ("brand", "model")
    readonly_fields = ("created_at", "updated_at")
