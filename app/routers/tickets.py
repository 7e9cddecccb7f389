from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.core.dependencies import get_ticket_service
from app.schemas.common import MessageResponse
from app.schemas.ticket import TicketEmailRequest
from app.services.ticket_service import TicketService

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


@router.get("/download")
def download_ticket(
    eventName: str = Query("Event"),
    eventWhen: str = Query("Date"),
    eventVenue: str = Query("Venue"),
    userName: Optional[str] = Query(None),
    orderId: Optional[str] = Query(None),
    service: TicketService = Depends(get_ticket_service)
):
    pdf_bytes, filename = service.render_download(eventName, eventWhen, eventVenue, userName, orderId)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.post("/send-email", response_model=MessageResponse)
def send_ticket_email(
    payload: TicketEmailRequest,
    service: TicketService = Depends(get_ticket_service)
):
    service.send_ticket_email(payload)
    return MessageResponse(message="Email sent")
