from pydantic import AliasChoices, EmailStr, Field
from typing import Optional

from busticket.schemas import CamelModel, Money, PaymentStatus
from busticket.tickets.schemas import TicketConfirmation

# Order creation
class CreateOrderRequest(CamelModel):
    """Request to start a ticket purchase"""
    passengers: int
    from_stop: str = Field(..., min_length=1)
    to_stop: str = Field(..., min_length=1)
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    user_email: Optional[EmailStr] = None
    user_phone: Optional[str] = None

class FareDetails(CamelModel):
    base_fare: Money
    passengers: int
    total_fare: Money

class OrderContact(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

class CreateOrderResponse(CamelModel):
    success: bool = True
    order_id: str
    amount: int
    currency: str
    ticket_id: str
    key: str
    user: OrderContact
    fare_details: FareDetails

# Confirmation
class VerifyPaymentRequest(CamelModel):
    """Checkout callback payload; Razorpay's own field names are accepted too"""
    gateway_order_id: str = Field(
        ..., validation_alias=AliasChoices("gatewayOrderId", "gateway_order_id", "razorpay_order_id")
    )
    gateway_payment_id: str = Field(
        ..., validation_alias=AliasChoices("gatewayPaymentId", "gateway_payment_id", "razorpay_payment_id")
    )
    signature: str = Field(
        ..., validation_alias=AliasChoices("signature", "razorpay_signature")
    )
    ticket_id: str = Field(
        ..., validation_alias=AliasChoices("ticketId", "ticket_id")
    )

class PaymentOutcome(CamelModel):
    """Result of a confirmation attempt against a ticket"""
    ticket_id: str
    payment_status: PaymentStatus
    payment_id: Optional[str] = None
    qr_code: Optional[str] = None
    transitioned: bool = False
    verified: bool = False
    confirmation: Optional[TicketConfirmation] = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

class VerifyPaymentResponse(CamelModel):
    success: bool = True
    message: str = "Payment verified successfully! Ticket booked."
    ticket_id: str
    payment_id: Optional[str] = None
    qr_code: Optional[str] = None
    download_link: str

class WebhookAck(CamelModel):
    status: str = "OK"
