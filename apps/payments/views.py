"""API views for the payment ledger.

Payments produced by the checkout flow are written by the rental
orchestrator; the endpoints here list them and let a renter record a
manual (cash, card, PayPal) payment against one of their rentals.
"""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.rentals.models import Rental
from .models import Payment
from .serializers import PaymentSerializer

logger = logging.getLogger(__name__)


class PaymentViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Payments visible to the renter who owns the rental, or to staff."""

    queryset = Payment.objects.select_related("rental", "rental__user").all()
    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if user.is_staff:
            return qs
        return qs.filter(rental__user=user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rental = serializer.validated_data["rental"]
        if rental.user_id != request.user.id and not request.user.is_staff:
            return Response(
                {"detail": "You can only record payments for your own rentals."},
                status=status.HTTP_403_FORBIDDEN,
            )
        payment = serializer.save()
        logger.info(
            f"Manual payment {payment.id} recorded for rental {rental.id}: "
            f"{payment.amount} via {payment.payment_method} ({payment.status})"
        )
        headers = self.get_success_headers(serializer.data)
        return Response(serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=False, methods=["get"], url_path=r"rental/(?P<rental_id>\d+)")
    def by_rental(self, request, rental_id=None):  # type: ignore
        rentals = Rental.objects.all()
        if not request.user.is_staff:
            rentals = rentals.filter(user=request.user)
        rental = get_object_or_404(rentals, pk=rental_id)
        payments = self.get_queryset().filter(rental=rental)
        return Response(self.get_serializer(payments, many=True).data)

    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>\d+)")
    def by_user(self, request, user_id=None):  # type: ignore
        if int(user_id) != request.user.id and not request.user.is_staff:
            return Response(status=status.HTTP_403_FORBIDDEN)
        payments = self.get_queryset().filter(rental__user_id=user_id)
        return Response(self.get_serializer(payments, many=True).data)
