import base64
from datetime import datetime, timezone
from io import BytesIO
from typing import Optional
from zoneinfo import ZoneInfo

from reportlab.lib import colors
from reportlab.lib.pagesizes import A6
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from busticket.config import settings
from busticket.schemas import PaymentStatus

STATUS_LABELS = {
    PaymentStatus.PAID.value: "Confirmed",
    PaymentStatus.PENDING.value: "Pending",
    PaymentStatus.FAILED.value: "Payment failed",
    PaymentStatus.REFUNDED.value: "Refunded",
}

def format_booking_time(value: Optional[datetime], tz_name: Optional[str] = None) -> str:
    """Format as 19/10/2026, 08:15:00 am IST in the display timezone"""
    if value is None:
        return "-"
    # Naive values come back from SQLite and are stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(ZoneInfo(tz_name or settings.DISPLAY_TIMEZONE))
    formatted = local.strftime("%d/%m/%Y, %I:%M:%S %p").replace("AM", "am").replace("PM", "pm")
    return f"{formatted} {local.tzname()}"

def render_ticket_receipt(ticket) -> bytes:
    """Render a printable single page PDF receipt for a ticket record"""

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A6,
        leftMargin=8 * mm,
        rightMargin=8 * mm,
        topMargin=8 * mm,
        bottomMargin=8 * mm,
        title=f"Ticket {ticket.ticket_id}",
    )
    styles = getSampleStyleSheet()
    story = []

    story.append(Paragraph(settings.PROJECT_NAME, styles['Title']))
    story.append(Paragraph(f"Ticket #{ticket.ticket_id}", styles['Heading3']))
    story.append(Spacer(1, 6))

    details = [
        ["Ticket ID:", ticket.ticket_id],
        ["From:", ticket.from_stop],
        ["To:", ticket.to_stop],
        ["Passengers:", str(ticket.passengers)],
        ["Fare:", f"Rs. {ticket.fare}"],
        ["Booking Time:", format_booking_time(ticket.booking_time)],
        ["Status:", STATUS_LABELS.get(ticket.payment_status, ticket.payment_status)],
    ]

    details_table = Table(details, colWidths=[28 * mm, 56 * mm])
    details_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, -1), colors.whitesmoke),
        ('TEXTCOLOR', (0, 0), (-1, -1), colors.black),
        ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTNAME', (1, 0), (1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    story.append(details_table)
    story.append(Spacer(1, 8))

    if ticket.qr_code_data:
        story.append(Paragraph("Scan QR Code at bus entry:", styles['Normal']))
        qr_png = BytesIO(base64.b64decode(ticket.qr_code_data))
        story.append(Image(qr_png, width=35 * mm, height=35 * mm))

    doc.build(story)
    return buffer.getvalue()
