"""Serializers for the payment ledger."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from apps.rentals.models import Rental
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    rental_id = serializers.PrimaryKeyRelatedField(
        source="rental",
        queryset=Rental.objects.all(),
    )
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0.00"))
    payment_method = serializers.ChoiceField(choices=Payment.Method.choices)
    status = serializers.ChoiceField(choices=Payment.Status.choices)

    class Meta:
        model = Payment
        fields = [
            "id",
            "rental_id",
            "amount",
            "payment_method",
            "status",
            "transaction_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "transaction_id", "created_at", "updated_at"]
