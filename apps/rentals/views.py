"""API views for rentals and the checkout redirect callbacks."""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import NotFound  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.cars.models import Car
from apps.payments.gateway import PaymentGatewayError
from apps.payments.serializers import PaymentSerializer

from .application.command_handlers import (
    CancelRentalCommand,
    CancelRentalHandler,
    FinalizePaymentCommand,
    FinalizePaymentHandler,
    InitiateRentalCommand,
    InitiateRentalHandler,
)
from .models import Rental
from .serializers import RentalCreateSerializer, RentalSerializer
from .services import CarNotFoundError, RentalConflictError, RentalNotFoundError

logger = logging.getLogger(__name__)


class IsRentalOwnerOrStaff(permissions.BasePermission):
    def has_object_permission(self, request, view, obj):  # type: ignore
        return request.user.is_staff or obj.user_id == request.user.id


class RentalViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Rentals of the current user; staff see everyone's."""

    queryset = Rental.objects.select_related("car", "user").all()
    serializer_class = RentalSerializer
    permission_classes = [permissions.IsAuthenticated, IsRentalOwnerOrStaff]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if user.is_staff:
            return qs
        return qs.filter(user=user)

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return RentalCreateSerializer
        return super().get_serializer_class()

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        command = InitiateRentalCommand(
            user_id=request.user.id,
            car_id=data["car_id"].id,
            start_date=data["start_date"],
            end_date=data["end_date"],
            total_price=data["total_price"],
        )

        try:
            result = InitiateRentalHandler.from_settings().handle(command)
        except CarNotFoundError as exc:
            raise NotFound(str(exc))
        except RentalConflictError as exc:
            return Response({"error": str(exc)}, status=status.HTTP_409_CONFLICT)
        except PaymentGatewayError as exc:
            return Response({"error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({"url": result.checkout_url}, status=status.HTTP_200_OK)

    def perform_destroy(self, instance):  # type: ignore
        try:
            CancelRentalHandler().handle(
                CancelRentalCommand(
                    rental_id=instance.id,
                    reason="deleted",
                    cancelled_by=self.request.user.id,
                )
            )
        except RentalNotFoundError as exc:
            raise NotFound(str(exc))

    @action(detail=True, methods=["delete"])
    def cancel(self, request, pk=None):  # type: ignore
        rental = self.get_object()
        try:
            result = CancelRentalHandler().handle(
                CancelRentalCommand(
                    rental_id=rental.id,
                    reason="cancelled_by_user",
                    cancelled_by=request.user.id,
                )
            )
        except RentalNotFoundError as exc:
            raise NotFound(str(exc))
        return Response(
            {
                "id": result.rental_id,
                "status": Rental.Status.CANCELLED,
                "payments_removed": result.payments_removed,
            }
        )

    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>\d+)")
    def by_user(self, request, user_id=None):  # type: ignore
        if int(user_id) != request.user.id and not request.user.is_staff:
            return Response(status=status.HTTP_403_FORBIDDEN)
        rentals = self.get_queryset().filter(user_id=user_id)
        return Response(self.get_serializer(rentals, many=True).data)

    @action(detail=False, methods=["get"], url_path=r"car/(?P<car_id>\d+)")
    def by_car(self, request, car_id=None):  # type: ignore
        car = get_object_or_404(Car, pk=car_id)
        rentals = self.get_queryset().filter(car=car)
        return Response(self.get_serializer(rentals, many=True).data)


class PaymentSuccessView(APIView):
    """Landing point of the processor's success redirect."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def get(self, request, rental_id):  # type: ignore
        try:
            payment = FinalizePaymentHandler().handle(FinalizePaymentCommand(rental_id=rental_id))
        except RentalNotFoundError as exc:
            raise NotFound(str(exc))

        return Response(
            {
                "rental": RentalSerializer(payment.rental).data,
                "payment": PaymentSerializer(payment).data,
            }
        )


class PaymentCancelView(APIView):
    """Landing point of the processor's cancel redirect."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def get(self, request, rental_id):  # type: ignore
        try:
            result = CancelRentalHandler().handle(CancelRentalCommand(rental_id=rental_id))
        except RentalNotFoundError as exc:
            raise NotFound(str(exc))

        return Response(
            {
                "id": result.rental_id,
                "status": Rental.Status.CANCELLED,
                "payments_removed": result.payments_removed,
            }
        )
