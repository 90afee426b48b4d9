"""
Ticket Module

Read side of tickets plus the collaborators that turn a confirmed payment
into something a rider can show on the bus:

- service.py: ticket lookups and public projections
- qr.py: QR code encoding of ticket identifiers
- receipt.py: printable PDF receipts
- notifier.py: confirmation emails, dispatched as background tasks
- router.py: ticket detail and download endpoints
"""

from .router import router
from .service import TicketService
from .qr import QRCodeEncoder
from .notifier import EmailNotifier, dispatch_ticket_confirmation

__all__ = [
    "router",
    "TicketService",
    "QRCodeEncoder",
    "EmailNotifier",
    "dispatch_ticket_confirmation",
]
