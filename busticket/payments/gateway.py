import logging
from typing import Dict, Optional

import httpx
from pydantic import BaseModel

from busticket.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

class GatewayOrder(BaseModel):
    """Order as returned by the gateway"""
    id: str
    amount: int
    currency: str
    receipt: Optional[str] = None
    status: Optional[str] = None

class RazorpayClient:
    """Minimal Razorpay Orders API client"""

    def __init__(self, key_id: str, key_secret: str, base_url: str, timeout: float = 10.0):
        self.key_id = key_id
        self.base_url = base_url.rstrip("/")
        self._auth = (key_id, key_secret)
        self.timeout = timeout

    def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, str]] = None
    ) -> GatewayOrder:
        """Create an auto-captured order; amount is in currency subunits"""

        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeError("Gateway amounts must be integer subunits")

        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
            "payment_capture": 1,
        }

        try:
            response = httpx.post(
                f"{self.base_url}/orders",
                json=payload,
                auth=self._auth,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error("Razorpay order request failed: %s", e)
            raise PaymentGatewayError(f"Payment gateway unreachable: {e}")

        if response.status_code >= 400:
            reason = _error_description(response)
            logger.error("Razorpay rejected order (%s): %s", response.status_code, reason)
            raise PaymentGatewayError(f"Payment gateway rejected the order: {reason}", status_code=response.status_code)

        try:
            data = response.json()
            return GatewayOrder(
                id=data["id"],
                amount=data["amount"],
                currency=data["currency"],
                receipt=data.get("receipt"),
                status=data.get("status"),
            )
        except (ValueError, KeyError, TypeError, AttributeError):
            # pydantic's ValidationError is a ValueError too
            logger.error("Razorpay returned an unreadable order: %s", response.text[:200])
            raise PaymentGatewayError("Payment gateway returned an invalid order response", status_code=response.status_code)

def _error_description(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["description"]
    except (ValueError, KeyError, TypeError):
        return response.text[:200]
