from typing import Optional, Tuple
from fastapi import HTTPException, status
import logging
import re

from app.core.exceptions import DeliveryError, RenderError
from app.schemas.ticket import TicketEmailRequest
from app.utils.email_service import EmailService
from app.utils.ticket_pdf import TicketDocument, generate_ticket_pdf

logger = logging.getLogger(__name__)


def ticket_filename(event_name: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", event_name).strip("-").lower()
    return f"ticket-{slug or 'event'}.pdf"


class TicketService:

    def __init__(self, email_service: EmailService):
        self.email_service = email_service

    def _render(self, document: TicketDocument) -> bytes:
        try:
            return generate_ticket_pdf(document)
        except RenderError as e:
            logger.error(f"Ticket rendering failed: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Could not generate ticket document"
            )

    def render_download(
        self,
        event_name: str,
        event_when: str,
        event_venue: str,
        user_name: Optional[str] = None,
        order_id: Optional[str] = None
    ) -> Tuple[bytes, str]:
        document = TicketDocument(
            event_name=event_name,
            event_date=event_when,
            event_venue=event_venue,
            user_name=user_name,
            order_id=order_id
        )
        pdf_bytes = self._render(document)
        return pdf_bytes, ticket_filename(event_name)

    def send_ticket_email(self, request: TicketEmailRequest) -> None:
        document = TicketDocument(
            event_name=request.eventName,
            event_date=request.eventDate,
            event_venue=request.eventVenue,
            user_name=request.userName,
            order_id=request.orderId
        )
        pdf_bytes = self._render(document)
        logger.info(f"Ticket PDF generated for '{request.eventName}' ({len(pdf_bytes)} bytes)")

        try:
            self.email_service.send_ticket(
                to_email=request.userEmail,
                event_name=request.eventName,
                pdf_bytes=pdf_bytes,
                user_name=request.userName
            )
        except DeliveryError:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Could not send email"
            )
