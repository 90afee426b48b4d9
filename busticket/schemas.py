from pydantic import BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel
from decimal import Decimal
from enum import Enum
from typing import Annotated

class CamelModel(BaseModel):
    """Base model exposing camelCase JSON while keeping snake_case attributes"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class PaymentStatus(str, Enum):
    """Ticket payment status enumeration"""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

class TransactionStatus(str, Enum):
    """Ledger entry status enumeration"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

class TransactionType(str, Enum):
    """Ledger entry type enumeration"""
    TICKET_PURCHASE = "ticket_purchase"
    WALLET_TOPUP = "wallet_topup"
    REFUND = "refund"

# Allowed ticket transitions; refunds only ever follow a paid ticket
TICKET_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: set(),
    PaymentStatus.REFUNDED: set(),
}

# Transaction status mirrored by each terminal ticket status
TRANSACTION_STATUS_FOR = {
    PaymentStatus.PAID: TransactionStatus.COMPLETED,
    PaymentStatus.FAILED: TransactionStatus.FAILED,
}

# Decimal in Python, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
