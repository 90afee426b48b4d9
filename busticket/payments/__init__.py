"""
Payments Module

Turns a fare into a paid ticket through the Razorpay gateway:

- gateway.py: Orders API client
- signatures.py: checkout and webhook HMAC verification
- service.py: order creation, pending bookkeeping and the guarded
  pending -> paid/failed transition shared by both confirmation paths
- router.py: create-order, verify-payment and webhook endpoints
"""

from .service import PaymentService, calculate_fare, to_subunits
from .gateway import RazorpayClient, GatewayOrder
from .signatures import PaymentSignatureVerifier

__all__ = [
    "PaymentService",
    "calculate_fare",
    "to_subunits",
    "RazorpayClient",
    "GatewayOrder",
    "PaymentSignatureVerifier",
]
