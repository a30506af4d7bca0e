import logging
from abc import ABC, abstractmethod
from typing import Optional

import razorpay
import requests

from app.config import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """The gateway could not be reached or refused the request."""


class PaymentGateway(ABC):
    """Narrow interface the order core needs from a hosted payment gateway."""

    key_id: Optional[str] = None

    @abstractmethod
    def create_intent(self, amount: int, receipt: str) -> str:
        """Create a remote order for `amount` minor units and return its reference."""

    @abstractmethod
    def verify_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        ...


class RazorpayGateway(PaymentGateway):
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        currency: str = "INR",
        timeout: float = 10.0,
    ):
        self.key_id = key_id
        self.currency = currency
        self.timeout = timeout
        self.client = razorpay.Client(auth=(key_id, key_secret))

    def create_intent(self, amount: int, receipt: str) -> str:
        logger.info(f"Creating Razorpay order: receipt={receipt}, amount={amount}")
        try:
            razorpay_order = self.client.order.create(
                data={
                    "amount": amount,  # paise
                    "currency": self.currency,
                    "receipt": receipt,
                },
                timeout=self.timeout,
            )
        except (requests.RequestException, razorpay.errors.BadRequestError,
                razorpay.errors.ServerError, razorpay.errors.GatewayError) as e:
            logger.warning(f"Razorpay order creation failed for {receipt}: {e}")
            raise PaymentGatewayError(str(e)) from e

        return razorpay_order["id"]

    def verify_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        # HMAC-SHA256(secret, order_id|payment_id), constant time compare inside the SDK
        try:
            self.client.utility.verify_payment_signature({
                "razorpay_order_id": gateway_order_id,
                "razorpay_payment_id": payment_id,
                "razorpay_signature": signature,
            })
        except razorpay.errors.SignatureVerificationError:
            return False
        return True


def build_payment_gateway() -> Optional[PaymentGateway]:
    if not settings.razorpay_enabled:
        logger.warning("Razorpay keys not configured; online payments disabled")
        return None

    return RazorpayGateway(
        key_id=settings.RAZORPAY_KEY_ID,
        key_secret=settings.RAZORPAY_KEY_SECRET,
        currency=settings.CURRENCY,
        timeout=settings.RAZORPAY_TIMEOUT_SECONDS,
    )


payment_gateway = build_payment_gateway()


def get_payment_gateway() -> Optional[PaymentGateway]:
    return payment_gateway
