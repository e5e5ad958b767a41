"""Redirect targets handed to the payment processor."""

from django.urls import path  # type: ignore

from .views import PaymentCancelView, PaymentSuccessView

urlpatterns = [
    path("payment-success/<int:rental_id>/", PaymentSuccessView.as_view(), name="payment-success"),
    path("payment-cancel/<int:rental_id>/", PaymentCancelView.as_view(), name="payment-cancel"),
]
