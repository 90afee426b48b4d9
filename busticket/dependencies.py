"""
Process-wide collaborators handed to routers through ``Depends``.

Each provider builds its object once; tests swap them out with
``app.dependency_overrides``.
"""

from functools import lru_cache

from busticket.config import settings
from busticket.payments.gateway import RazorpayClient
from busticket.payments.signatures import PaymentSignatureVerifier
from busticket.tickets.notifier import EmailNotifier
from busticket.tickets.qr import QRCodeEncoder

@lru_cache()
def get_payment_gateway() -> RazorpayClient:
    return RazorpayClient(
        key_id=settings.RAZORPAY_KEY_ID,
        key_secret=settings.RAZORPAY_KEY_SECRET,
        base_url=settings.RAZORPAY_BASE_URL,
        timeout=settings.RAZORPAY_TIMEOUT_SECONDS,
    )

@lru_cache()
def get_signature_verifier() -> PaymentSignatureVerifier:
    return PaymentSignatureVerifier(settings.RAZORPAY_KEY_SECRET, settings.webhook_secret)

@lru_cache()
def get_qr_encoder() -> QRCodeEncoder:
    return QRCodeEncoder()

@lru_cache()
def get_notifier() -> EmailNotifier:
    return EmailNotifier(
        host=settings.EMAIL_HOST,
        port=settings.EMAIL_PORT,
        username=settings.EMAIL_USER,
        password=settings.EMAIL_PASS,
        sender=settings.email_sender,
        use_tls=settings.EMAIL_USE_TLS,
    )
