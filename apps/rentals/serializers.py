"""Serializers for the rentals API."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from apps.cars.models import Car
from .models import Rental


class RentalCreateSerializer(serializers.Serializer):
    car_id = serializers.PrimaryKeyRelatedField(queryset=Car.objects.all())
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    total_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs["end_date"] <= attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date must be after start date."})
        return attrs


class RentalSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    car_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Rental
        fields = [
            "id",
            "user_id",
            "car_id",
            "start_date",
            "end_date",
            "total_price",
            "status",
            "checkout_session_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
