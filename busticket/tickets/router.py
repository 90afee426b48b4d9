from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from busticket.database import get_db
from busticket.exceptions import NotFoundError
from busticket.tickets.schemas import TicketResponse
from busticket.tickets.service import TicketService

router = APIRouter()

@router.get("/ticket/download/{ticket_id}")
def download_ticket(ticket_id: str, db: Session = Depends(get_db)):
    """Download a printable PDF receipt"""

    ticket_service = TicketService(db)

    try:
        pdf_bytes = ticket_service.render_receipt(ticket_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="ticket_{ticket_id}.pdf"'}
    )

@router.get("/ticket/{ticket_id}", response_model=TicketResponse)
def get_ticket(ticket_id: str, db: Session = Depends(get_db)):
    """Get ticket details by ID"""

    ticket_service = TicketService(db)

    try:
        ticket = ticket_service.get_ticket_detail(ticket_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return TicketResponse(ticket=ticket)
