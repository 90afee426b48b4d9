import base64
import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from html import escape
from typing import Optional

from busticket.config import settings
from busticket.tickets.receipt import format_booking_time
from busticket.tickets.schemas import TicketConfirmation

logger = logging.getLogger(__name__)

class EmailNotifier:
    """Delivers ticket confirmations by email over SMTP"""

    def __init__(
        self,
        host: Optional[str],
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.sender)

    def send_ticket_confirmation(self, ticket: TicketConfirmation, qr_code_base64: Optional[str]) -> bool:
        """Send the confirmation email; returns False when there is nothing to send"""

        if not ticket.user_email:
            logger.info("Ticket %s has no contact email, skipping confirmation", ticket.ticket_id)
            return False

        if not self.is_configured:
            logger.warning("SMTP is not configured, confirmation for %s not sent", ticket.ticket_id)
            return False

        message = self._build_message(ticket, qr_code_base64)

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)

        logger.info("Ticket email sent for %s", ticket.ticket_id)
        return True

    def _build_message(self, ticket: TicketConfirmation, qr_code_base64: Optional[str]) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = f"Bengaluru Bus Ticket Confirmation - {ticket.ticket_id}"
        message["From"] = self.sender
        message["To"] = ticket.user_email

        message.set_content(
            f"Ticket {ticket.ticket_id} confirmed.\n"
            f"From: {ticket.from_stop}\n"
            f"To: {ticket.to_stop}\n"
            f"Passengers: {ticket.passengers}\n"
            f"Fare: Rs. {ticket.fare}\n"
            f"Booking Time: {format_booking_time(ticket.booking_time)}\n"
        )

        qr_cid = make_msgid(domain="busticket")
        qr_block = ""
        if qr_code_base64:
            qr_block = (
                '<div style="text-align: center; margin: 20px 0;">'
                '<p><strong>Scan QR Code at bus entry:</strong></p>'
                f'<img src="cid:{qr_cid[1:-1]}" alt="QR Code" style="width: 150px; height: 150px;"/>'
                '</div>'
            )

        message.add_alternative(f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2 style="color: #2c3e50; text-align: center;">{escape(settings.PROJECT_NAME)}</h2>
  <h3 style="color: #27ae60;">Ticket Confirmed!</h3>
  <p>Hello {escape(ticket.user_name)},</p>
  <div style="background: #f8f9fa; padding: 15px; border-radius: 8px;">
    <p><strong>Ticket ID:</strong> {escape(ticket.ticket_id)}</p>
    <p><strong>From:</strong> {escape(ticket.from_stop)}</p>
    <p><strong>To:</strong> {escape(ticket.to_stop)}</p>
    <p><strong>Passengers:</strong> {ticket.passengers}</p>
    <p><strong>Fare:</strong> &#8377;{ticket.fare}</p>
    <p><strong>Booking Time:</strong> {format_booking_time(ticket.booking_time)}</p>
    <p><strong>Status:</strong> Confirmed</p>
  </div>
  {qr_block}
</div>
""", subtype="html")

        if qr_code_base64:
            html_part = message.get_payload()[1]
            html_part.add_related(
                base64.b64decode(qr_code_base64),
                maintype="image",
                subtype="png",
                cid=qr_cid
            )

        return message

def dispatch_ticket_confirmation(notifier, ticket: TicketConfirmation, qr_code_base64: Optional[str]):
    """Background task body: delivery problems are logged, never raised to the payer"""
    try:
        notifier.send_ticket_confirmation(ticket, qr_code_base64)
    except Exception:
        logger.exception("Failed to deliver confirmation for ticket %s", ticket.ticket_id)
