import hashlib
import hmac

from app.services.payment_gateway import PaymentGateway, PaymentGatewayError

GATEWAY_SECRET = "rzp_test_secret"


def sign(gateway_order_id: str, payment_id: str, secret: str = GATEWAY_SECRET) -> str:
    return hmac.new(
        secret.encode(),
        f"{gateway_order_id}|{payment_id}".encode(),
        hashlib.sha256,
    ).hexdigest()


class FakeGateway(PaymentGateway):
    """In-memory gateway: numbered order references, real HMAC signature checks."""

    key_id = "rzp_test_key"

    def __init__(self, secret: str = GATEWAY_SECRET):
        self.secret = secret
        self.intents = []
        self.fail = False

    def create_intent(self, amount: int, receipt: str) -> str:
        if self.fail:
            raise PaymentGatewayError("Read timed out")
        reference = f"order_fake{len(self.intents) + 1}"
        self.intents.append({"amount": amount, "receipt": receipt, "id": reference})
        return reference

    def verify_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        return hmac.compare_digest(sign(gateway_order_id, payment_id, self.secret), signature)
