from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from typing import Optional

from busticket.config import settings
from busticket.database import get_db
from busticket.dependencies import get_notifier, get_payment_gateway, get_qr_encoder, get_signature_verifier
from busticket.exceptions import NotFoundError, PaymentGatewayError
from busticket.payments.schemas import (
    CreateOrderRequest, CreateOrderResponse, VerifyPaymentRequest,
    VerifyPaymentResponse, PaymentOutcome, WebhookAck
)
from busticket.payments.service import PaymentService
from busticket.schemas import PaymentStatus
from busticket.tickets.notifier import dispatch_ticket_confirmation

router = APIRouter()

def get_payment_service(
    db: Session = Depends(get_db),
    gateway=Depends(get_payment_gateway),
    verifier=Depends(get_signature_verifier),
    qr_encoder=Depends(get_qr_encoder)
) -> PaymentService:
    return PaymentService(db, gateway=gateway, verifier=verifier, qr_encoder=qr_encoder)

def schedule_confirmation(background_tasks: BackgroundTasks, notifier, outcome: PaymentOutcome):
    """Queue the confirmation email for the request that settled the ticket"""
    if outcome.transitioned and outcome.confirmation is not None:
        background_tasks.add_task(dispatch_ticket_confirmation, notifier, outcome.confirmation, outcome.qr_code)

@router.post("/create-order", response_model=CreateOrderResponse)
def create_order(
    request: CreateOrderRequest,
    payment_service: PaymentService = Depends(get_payment_service)
):
    """Create a gateway order and a pending ticket"""

    try:
        return payment_service.create_order(request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except PaymentGatewayError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Payment order creation failed: {str(e)}"
        )

@router.post("/verify-payment", response_model=VerifyPaymentResponse)
def verify_payment(
    request: VerifyPaymentRequest,
    background_tasks: BackgroundTasks,
    payment_service: PaymentService = Depends(get_payment_service),
    notifier=Depends(get_notifier)
):
    """Confirm a payment reported by the checkout widget"""

    try:
        outcome = payment_service.confirm_payment(request)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not outcome.verified:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payment verification failed. Signature mismatch."
        )

    if outcome.payment_status != PaymentStatus.PAID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Payment for this ticket is {outcome.payment_status.value}"
        )

    schedule_confirmation(background_tasks, notifier, outcome)

    return VerifyPaymentResponse(
        ticket_id=outcome.ticket_id,
        payment_id=outcome.payment_id,
        qr_code=outcome.qr_code,
        download_link=f"{settings.PUBLIC_BASE_URL}{settings.API_PREFIX}/ticket/download/{outcome.ticket_id}"
    )

@router.post("/webhook", response_model=WebhookAck)
@router.post("/razorpay-webhook", response_model=WebhookAck, include_in_schema=False)
async def payment_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_razorpay_signature: Optional[str] = Header(None),
    payment_service: PaymentService = Depends(get_payment_service),
    notifier=Depends(get_notifier)
):
    """Gateway webhook; always acknowledged so ignored events are not retried"""

    body = await request.body()
    outcome = await run_in_threadpool(payment_service.handle_webhook, body, x_razorpay_signature)

    if outcome is not None:
        schedule_confirmation(background_tasks, notifier, outcome)

    return WebhookAck()
