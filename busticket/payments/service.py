import json
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from busticket.config import settings
from busticket.exceptions import NotFoundError
from busticket.models import Ticket, Transaction, User
from busticket.payments.schemas import (
    CreateOrderRequest, CreateOrderResponse, FareDetails, OrderContact,
    VerifyPaymentRequest, PaymentOutcome
)
from busticket.schemas import (
    PaymentStatus, TransactionStatus, TransactionType,
    TICKET_TRANSITIONS, TRANSACTION_STATUS_FOR
)
from busticket.tickets.service import TicketService, to_ticket_confirmation
from busticket.users.service import UserService

logger = logging.getLogger(__name__)

CAPTURED_EVENT = "payment.captured"

def calculate_fare(passengers: int) -> Decimal:
    """Flat fare per passenger"""
    if passengers <= 0:
        raise ValueError("Passenger count must be a positive integer")
    return settings.BASE_FARE * passengers

def to_subunits(amount: Decimal) -> int:
    """Convert a fare to the integer subunit amount the gateway expects"""
    subunits = amount * settings.CURRENCY_SUBUNIT
    if subunits != subunits.to_integral_value():
        raise ValueError(f"Fare {amount} has more precision than the currency allows")
    return int(subunits)

def generate_ticket_id() -> str:
    return f"TKT{uuid.uuid4().hex[:12].upper()}"

def generate_transaction_id() -> str:
    return f"TXN{uuid.uuid4().hex[:12].upper()}"

class PaymentService:
    """Order creation and payment confirmation for bus tickets"""

    def __init__(self, db: Session, gateway=None, verifier=None, qr_encoder=None):
        self.db = db
        self.gateway = gateway
        self.verifier = verifier
        self.qr_encoder = qr_encoder
        self.tickets = TicketService(db)

    # ------------------------------------
    # Order creation
    # ------------------------------------

    def create_order(self, request: CreateOrderRequest) -> CreateOrderResponse:
        """Create a gateway order, then record the pending ticket and transaction"""

        fare = calculate_fare(request.passengers)
        amount = to_subunits(fare)

        user = None
        if request.user_id is not None:
            user = UserService.get_user_by_id(self.db, request.user_id)
            if not user:
                raise ValueError("User not found")

        user_name = request.user_name or (user.name if user else None) or "Guest"
        user_email = request.user_email or (user.email if user else None) or ""
        user_phone = request.user_phone or (user.phone if user else None) or ""

        ticket_id = generate_ticket_id()
        transaction_id = generate_transaction_id()

        # Raises PaymentGatewayError before anything is written
        order = self.gateway.create_order(
            amount=amount,
            currency=settings.CURRENCY,
            receipt=f"bus_ticket_{ticket_id}",
            notes={
                "ticketId": ticket_id,
                "fromStop": request.from_stop,
                "toStop": request.to_stop,
                "passengers": str(request.passengers),
                "userId": str(user.id) if user else "guest",
                "userName": user_name,
                "userEmail": user_email,
                "userPhone": user_phone,
            }
        )
        logger.info("Created gateway order %s for ticket %s (%s subunits)", order.id, ticket_id, amount,
                    extra={"ticket_id": ticket_id, "order_id": order.id})

        ticket = Ticket(
            ticket_id=ticket_id,
            user_id=user.id if user else None,
            user_name=user_name,
            user_email=user_email,
            user_phone=user_phone,
            from_stop=request.from_stop,
            to_stop=request.to_stop,
            passengers=request.passengers,
            fare=fare,
            gateway_order_id=order.id,
            payment_status=PaymentStatus.PENDING.value,
            booking_time=datetime.now(timezone.utc),
            travel_date=datetime.now(timezone.utc),
            seat_numbers=[],
            is_active=True
        )
        transaction = Transaction(
            transaction_id=transaction_id,
            user_id=user.id if user else None,
            amount=fare,
            type=TransactionType.TICKET_PURCHASE.value,
            gateway_order_id=order.id,
            status=TransactionStatus.PENDING.value,
            description=f"Bus ticket from {request.from_stop} to {request.to_stop} for {request.passengers} passenger(s)"
        )

        try:
            self.db.add_all([ticket, transaction])
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Could not record pending ticket for order %s", order.id)
            raise

        return CreateOrderResponse(
            order_id=order.id,
            amount=order.amount,
            currency=order.currency,
            ticket_id=ticket_id,
            key=settings.RAZORPAY_KEY_ID,
            user=OrderContact(name=user_name, email=user_email, phone=user_phone),
            fare_details=FareDetails(
                base_fare=settings.BASE_FARE,
                passengers=request.passengers,
                total_fare=fare
            )
        )

    # ------------------------------------
    # Confirmation: checkout callback
    # ------------------------------------

    def confirm_payment(self, request: VerifyPaymentRequest) -> PaymentOutcome:
        """Verify the checkout signature and settle the ticket accordingly"""

        ticket = self.tickets.find_ticket(request.ticket_id)
        if not ticket:
            raise NotFoundError("Ticket not found")

        if ticket.gateway_order_id != request.gateway_order_id:
            raise ValueError("Order does not belong to this ticket")

        verified = self.verifier.verify_payment_signature(
            request.gateway_order_id, request.gateway_payment_id, request.signature
        )

        if verified:
            outcome = self._settle(ticket, PaymentStatus.PAID, request.gateway_payment_id)
        else:
            logger.warning("Signature mismatch for ticket %s (order %s)", ticket.ticket_id, ticket.gateway_order_id,
                           extra={"ticket_id": ticket.ticket_id, "order_id": ticket.gateway_order_id})
            outcome = self._settle(ticket, PaymentStatus.FAILED)

        outcome.verified = verified
        return outcome

    # ------------------------------------
    # Confirmation: gateway webhook
    # ------------------------------------

    def handle_webhook(self, body: bytes, signature: Optional[str]) -> Optional[PaymentOutcome]:
        """Apply a verified capture event; anything else is ignored"""

        if not self.verifier.verify_webhook_signature(body, signature):
            logger.warning("Ignoring webhook with missing or invalid signature")
            return None

        try:
            event = json.loads(body)
        except ValueError:
            logger.warning("Ignoring webhook with malformed body")
            return None

        event_type = event.get("event") if isinstance(event, dict) else None
        if event_type != CAPTURED_EVENT:
            logger.info("Ignoring webhook event %s", event_type)
            return None

        try:
            payment = event["payload"]["payment"]["entity"]
            order_id = payment["order_id"]
            payment_id = payment["id"]
        except (KeyError, TypeError):
            logger.warning("Ignoring %s webhook without payment entity", CAPTURED_EVENT)
            return None

        ticket = self.tickets.find_ticket_by_order(order_id)
        if not ticket:
            logger.warning("Webhook for unknown order %s", order_id, extra={"order_id": order_id})
            return None

        outcome = self._settle(ticket, PaymentStatus.PAID, payment_id)
        if outcome.transitioned:
            logger.info("Webhook: payment %s captured for ticket %s", payment_id, ticket.ticket_id,
                        extra={"ticket_id": ticket.ticket_id, "order_id": order_id, "payment_id": payment_id})
        outcome.verified = True
        return outcome

    # ------------------------------------
    # State transitions
    # ------------------------------------

    def _settle(self, ticket: Ticket, target: PaymentStatus, payment_id: Optional[str] = None) -> PaymentOutcome:
        """Move a pending ticket to a terminal status, or report where it already is"""

        if ticket.payment_status != PaymentStatus.PENDING.value:
            return self._outcome(ticket, transitioned=False)

        extra = {}
        if target == PaymentStatus.PAID:
            extra["gateway_payment_id"] = payment_id
            extra["qr_code_data"] = self._encode_qr(ticket.ticket_id)

        transitioned = self.transition(ticket, target, **extra)
        self.db.refresh(ticket)
        return self._outcome(ticket, transitioned=transitioned)

    def transition(self, ticket: Ticket, target: PaymentStatus, **ticket_values) -> bool:
        """
        Conditionally move a ticket and its transaction to ``target``.

        The ticket row is only updated while it is still in a status that may
        lead to ``target``; the affected row count decides which of several
        concurrent confirmations wins. Only the winner updates the transaction
        and the rider's booking count, all in one database transaction.
        """

        sources = [s.value for s, targets in TICKET_TRANSITIONS.items() if target in targets]
        if not sources:
            raise ValueError(f"No transition leads to {target.value}")

        try:
            result = self.db.execute(
                update(Ticket)
                .where(Ticket.id == ticket.id, Ticket.payment_status.in_(sources))
                .values(payment_status=target.value, **ticket_values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self.db.rollback()
                logger.info("Ticket %s already settled, %s is a no-op", ticket.ticket_id, target.value,
                            extra={"ticket_id": ticket.ticket_id})
                return False

            transaction_status = TRANSACTION_STATUS_FOR.get(target)
            if transaction_status is not None:
                transaction_values = {"status": transaction_status.value}
                if ticket_values.get("gateway_payment_id"):
                    transaction_values["gateway_payment_id"] = ticket_values["gateway_payment_id"]
                self.db.execute(
                    update(Transaction)
                    .where(
                        Transaction.gateway_order_id == ticket.gateway_order_id,
                        Transaction.status == TransactionStatus.PENDING.value
                    )
                    .values(**transaction_values)
                    .execution_options(synchronize_session=False)
                )

            if target == PaymentStatus.PAID and ticket.user_id is not None:
                self.db.execute(
                    update(User)
                    .where(User.id == ticket.user_id)
                    .values(total_bookings=User.total_bookings + 1)
                    .execution_options(synchronize_session=False)
                )

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Ticket %s moved to %s", ticket.ticket_id, target.value,
                    extra={"ticket_id": ticket.ticket_id, "payment_id": ticket_values.get("gateway_payment_id")})
        return True

    def _encode_qr(self, ticket_id: str) -> Optional[str]:
        try:
            return self.qr_encoder.encode(ticket_id)
        except Exception:
            logger.exception("QR generation failed for ticket %s", ticket_id)
            return None

    def _outcome(self, ticket: Ticket, transitioned: bool) -> PaymentOutcome:
        outcome = PaymentOutcome(
            ticket_id=ticket.ticket_id,
            payment_status=ticket.payment_status,
            payment_id=ticket.gateway_payment_id,
            qr_code=ticket.qr_code_data,
            transitioned=transitioned
        )
        if transitioned and outcome.is_paid:
            outcome.confirmation = to_ticket_confirmation(ticket)
        return outcome
