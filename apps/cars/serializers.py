"""Serializers for the car catalog."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from .models import Car


class CarSerializer(serializers.ModelSerializer):
    price_per_day = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0.00"),
    )

    class Meta:
        model = Car
        fields = [
            "id",
            "brand",
            "model",
            "year",
            "price_per_day",
            "is_available",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {
            "is_available": {"required": True},
        }
