"""Car catalog API views."""

from __future__ import annotations

import logging

from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework.response import Response  # type: ignore

from .filters import CarFilterSet, search_cars
from .models import Car
from .serializers import CarSerializer

logger = logging.getLogger(__name__)


class CarViewSet(viewsets.ModelViewSet):
    """Catalog CRUD. Reading is public, changes need an account."""

    queryset = Car.objects.all()
    serializer_class = CarSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = CarFilterSet
    ordering_fields = ["price_per_day", "year", "created_at"]

    def perform_create(self, serializer):  # type: ignore
        car = serializer.save()
        logger.info(f"Car {car.id} added to catalog: {car}")

    def perform_destroy(self, instance):  # type: ignore
        logger.info(f"Car {instance.id} removed from catalog")
        instance.delete()

    def destroy(self, request, *args, **kwargs):  # type: ignore
        super().destroy(request, *args, **kwargs)
        return Response({"message": "Car deleted successfully"})

    @action(
        detail=False,
        methods=["get"],
        permission_classes=[permissions.AllowAny],
        pagination_class=None,
        filter_backends=[],
    )
    def search(self, request):  # type: ignore
        cars = search_cars(Car.objects.all(), request.query_params.get("query"))
        return Response(CarSerializer(cars, many=True).data)

    @action(detail=True, methods=["get"], permission_classes=[permissions.IsAuthenticated])
    def rentals(self, request, pk=None):  # type: ignore
        from apps.rentals.serializers import RentalSerializer  # local import to avoid circular

        car = self.get_object()
        rentals = car.rentals.select_related("user").all()
        if not request.user.is_staff:
            rentals = rentals.filter(user=request.user)
        page = self.paginate_queryset(rentals)
        if page is not None:
            return self.get_paginated_response(RentalSerializer(page, many=True).data)
        return Response(RentalSerializer(rentals, many=True).data)
