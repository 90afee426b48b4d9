"""
Razorpay signature checks.

The checkout callback and the webhook are signed differently: the callback
signs ``order_id|payment_id`` while the webhook signs the raw request body.
Both are hex encoded HMAC-SHA256 digests.
"""

import hashlib
import hmac
from typing import Optional, Union

class PaymentSignatureVerifier:

    def __init__(self, key_secret: str, webhook_secret: Optional[str] = None):
        self._key_secret = key_secret.encode()
        self._webhook_secret = (webhook_secret or key_secret).encode()

    def payment_signature(self, order_id: str, payment_id: str) -> str:
        message = f"{order_id}|{payment_id}".encode()
        return hmac.new(self._key_secret, message, hashlib.sha256).hexdigest()

    def webhook_signature(self, body: Union[bytes, str]) -> str:
        if isinstance(body, str):
            body = body.encode()
        return hmac.new(self._webhook_secret, body, hashlib.sha256).hexdigest()

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: Optional[str]) -> bool:
        if not signature:
            return False
        return hmac.compare_digest(self.payment_signature(order_id, payment_id).encode(), signature.encode())

    def verify_webhook_signature(self, body: Union[bytes, str], signature: Optional[str]) -> bool:
        if not signature:
            return False
        return hmac.compare_digest(self.webhook_signature(body).encode(), signature.encode())
