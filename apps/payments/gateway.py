"""
Hosted checkout payment gateway adapter.

The rental flow only needs one capability from the payment processor:
open a checkout session for an amount and get back the URL the renter
is redirected to. ``PaymentGateway`` describes that capability;
``StripeCheckoutGateway`` opens Stripe Checkout Sessions through the
official SDK and ``EmulatedCheckoutGateway`` stands in for it in local
development.
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping

import stripe
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

STRIPE_API_BASE_URL = "https://api.stripe.com"
DEFAULT_TIMEOUT = 10.0


class PaymentGatewayError(Exception):
    """The payment processor call failed or timed out."""


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    checkout_url: str


class PaymentGateway(ABC):
    """Capability set the booking flow depends on."""

    @abstractmethod
    def create_checkout_session(
        self,
        *,
        amount_cents: int,
        currency: str,
        description: str,
        success_url: str,
        cancel_url: str,
        metadata: Mapping[str, object],
    ) -> CheckoutSession:
        """Open a hosted checkout session.

        Raises:
            PaymentGatewayError: the processor rejected the request,
                was unreachable or did not answer in time.
        """


class StripeCheckoutGateway(PaymentGateway):
    """Stripe Checkout Sessions API through the ``stripe`` SDK.

    Credentials, endpoint and timeout are fixed at construction on a
    dedicated ``StripeClient``; the SDK's global ``stripe.api_key`` is
    never touched.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        api_base_url: str = STRIPE_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: stripe.StripeClient | None = None,
    ):
        if not secret_key:
            raise ImproperlyConfigured("Stripe secret key is required")
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout = timeout
        self.client = client or stripe.StripeClient(
            secret_key,
            base_addresses={"api": self.api_base_url},
            http_client=stripe.RequestsClient(timeout=timeout),
            max_network_retries=0,
        )

    def create_checkout_session(
        self,
        *,
        amount_cents: int,
        currency: str,
        description: str,
        success_url: str,
        cancel_url: str,
        metadata: Mapping[str, object],
    ) -> CheckoutSession:
        params = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "quantity": 1,
                    "price_data": {
                        "currency": currency,
                        "unit_amount": amount_cents,
                        "product_data": {"name": description},
                    },
                }
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": {key: str(value) for key, value in metadata.items()},
        }

        logger.info(
            f"Opening Stripe checkout session: {amount_cents} {currency}, metadata {dict(metadata)}"
        )

        try:
            session = self.client.v1.checkout.sessions.create(params=params)
        except stripe.APIConnectionError as e:
            logger.error(f"Stripe unreachable within {self.timeout}s: {e}")
            raise PaymentGatewayError(
                f"Payment gateway connection error or timeout after {self.timeout}s"
            ) from e
        except stripe.StripeError as e:
            error_msg = e.user_message or str(e) or "Unknown error"
            logger.error(f"Stripe returned {e.http_status}: {error_msg}")
            raise PaymentGatewayError(error_msg) from e

        session_id = getattr(session, "id", None)
        checkout_url = getattr(session, "url", None)
        if not session_id or not checkout_url:
            logger.error(f"Stripe response without session id or url: {session}")
            raise PaymentGatewayError("Payment gateway returned an incomplete checkout session")

        logger.info(f"Stripe checkout session created: {session_id}")
        return CheckoutSession(session_id=session_id, checkout_url=checkout_url)


class EmulatedCheckoutGateway(PaymentGateway):
    """Fake processor for DEBUG runs without a secret key."""

    checkout_base_url = "https://checkout.stripe.com/c/pay/"

    def create_checkout_session(
        self,
        *,
        amount_cents: int,
        currency: str,
        description: str,
        success_url: str,
        cancel_url: str,
        metadata: Mapping[str, object],
    ) -> CheckoutSession:
        session_id = f"cs_test_{uuid.uuid4().hex[:24]}"
        logger.warning(
            f"Emulated checkout session {session_id} for {amount_cents} {currency} "
            "(DEBUG mode without a Stripe secret key)"
        )
        return CheckoutSession(
            session_id=session_id,
            checkout_url=f"{self.checkout_base_url}{session_id}",
        )


def get_payment_gateway() -> PaymentGateway:
    """Build the gateway described by ``settings.PAYMENT_GATEWAY``."""
    config = getattr(settings, "PAYMENT_GATEWAY", {})
    secret_key = config.get("SECRET_KEY", "")

    if not secret_key:
        if settings.DEBUG:
            return EmulatedCheckoutGateway()
        raise ImproperlyConfigured("PAYMENT_GATEWAY['SECRET_KEY'] (STRIPE_SECRET) is not set")

    return StripeCheckoutGateway(
        secret_key,
        api_base_url=config.get("API_BASE_URL", STRIPE_API_BASE_URL),
        timeout=float(config.get("TIMEOUT", DEFAULT_TIMEOUT)),
    )
