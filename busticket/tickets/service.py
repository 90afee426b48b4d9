from typing import Optional

from sqlalchemy.orm import Session

from busticket.exceptions import NotFoundError
from busticket.models import Ticket
from busticket.tickets.receipt import render_ticket_receipt
from busticket.tickets.schemas import TicketDetail, TicketConfirmation

class TicketService:
    """Read side of tickets: lookups, projections and receipts"""

    def __init__(self, db: Session):
        self.db = db

    def find_ticket(self, ticket_id: str) -> Optional[Ticket]:
        return self.db.query(Ticket).filter(Ticket.ticket_id == ticket_id).first()

    def find_ticket_by_order(self, gateway_order_id: str) -> Optional[Ticket]:
        return self.db.query(Ticket).filter(Ticket.gateway_order_id == gateway_order_id).first()

    def get_ticket(self, ticket_id: str) -> Ticket:
        ticket = self.find_ticket(ticket_id)
        if not ticket:
            raise NotFoundError("Ticket not found")
        return ticket

    def get_ticket_detail(self, ticket_id: str) -> TicketDetail:
        return to_ticket_detail(self.get_ticket(ticket_id))

    def render_receipt(self, ticket_id: str) -> bytes:
        return render_ticket_receipt(self.get_ticket(ticket_id))

def to_ticket_detail(ticket: Ticket) -> TicketDetail:
    return TicketDetail(
        ticket_id=ticket.ticket_id,
        from_stop=ticket.from_stop,
        to_stop=ticket.to_stop,
        passengers=ticket.passengers,
        fare=ticket.fare,
        payment_status=ticket.payment_status,
        booking_time=ticket.booking_time,
        travel_date=ticket.travel_date,
        qr_code=ticket.qr_code_data,
        user_name=ticket.user_name,
        user_phone=ticket.user_phone
    )

def to_ticket_confirmation(ticket: Ticket) -> TicketConfirmation:
    return TicketConfirmation(
        ticket_id=ticket.ticket_id,
        user_name=ticket.user_name,
        user_email=ticket.user_email or "",
        from_stop=ticket.from_stop,
        to_stop=ticket.to_stop,
        passengers=ticket.passengers,
        fare=ticket.fare,
        booking_time=ticket.booking_time,
        seat_numbers=ticket.seat_numbers or []
    )
