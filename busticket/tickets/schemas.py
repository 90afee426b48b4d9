from typing import Optional, List
from datetime import datetime

from busticket.schemas import CamelModel, Money, PaymentStatus

class TicketDetail(CamelModel):
    """Public projection of a ticket"""
    ticket_id: str
    from_stop: str
    to_stop: str
    passengers: int
    fare: Money
    payment_status: PaymentStatus
    booking_time: Optional[datetime] = None
    travel_date: Optional[datetime] = None
    qr_code: Optional[str] = None
    user_name: Optional[str] = None
    user_phone: Optional[str] = None

class TicketResponse(CamelModel):
    success: bool = True
    ticket: TicketDetail

class TicketSummary(CamelModel):
    """Row in operator listings"""
    ticket_id: str
    from_stop: str
    to_stop: str
    fare: Money
    payment_status: PaymentStatus
    booking_time: Optional[datetime] = None

class TicketConfirmation(CamelModel):
    """Everything the notifier needs, detached from the database session"""
    ticket_id: str
    user_name: str
    user_email: str
    from_stop: str
    to_stop: str
    passengers: int
    fare: Money
    booking_time: Optional[datetime] = None
    seat_numbers: List[str] = []
