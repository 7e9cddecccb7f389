"""
Single-page PDF ticket rendering.

The page is A4 at 72 points per inch (595 x 842). Blocks are placed with a
simple top-down cursor: each block is drawn at the current ``y`` and the
cursor moves down by a fixed advance. Text is not wrapped, so very long
values run past the page edge or overlap the next block.
"""
from dataclasses import dataclass
from typing import Optional
import io
import logging

from reportlab.lib.colors import Color
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from app.core.exceptions import RenderError
from app.utils.qr_generator import QR_IMAGE_SIZE, build_ticket_payload, generate_qr_image

logger = logging.getLogger(__name__)

PAGE_WIDTH = 595
PAGE_HEIGHT = 842
MARGIN = 50

TITLE = "Your Digital Ticket - Nexivent"
ISSUED_TO_LABEL = "Issued to:"
INSTRUCTIONS = "Present this QR code at the event entrance."

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"

DARK = Color(0.1, 0.1, 0.1)
MUTED = Color(0.3, 0.3, 0.3)


@dataclass(frozen=True)
class TicketDocument:
    event_name: str
    event_date: str = ""
    event_venue: str = ""
    user_name: Optional[str] = None
    order_id: Optional[str] = None


def _draw_text(pdf: canvas.Canvas, text: str, y: float, font: str, size: int, color: Color = DARK) -> None:
    pdf.setFont(font, size)
    pdf.setFillColor(color)
    pdf.drawString(MARGIN, y, text)


def generate_ticket_pdf(document: TicketDocument) -> bytes:
    """
    Render a ticket to PDF bytes.

    Raises:
        RenderError: if the event name is missing or the renderer fails.
    """
    if not document.event_name or not document.event_name.strip():
        raise RenderError("Event name is required to render a ticket")

    try:
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
        pdf.setTitle(f"Ticket - {document.event_name}")
        pdf.setAuthor("Nexivent")

        y = PAGE_HEIGHT - 4 * MARGIN

        _draw_text(pdf, TITLE, y, BOLD_FONT, 24)
        y -= 50

        _draw_text(pdf, document.event_name, y, BOLD_FONT, 20)
        y -= 30

        _draw_text(pdf, f"Date: {document.event_date}", y, REGULAR_FONT, 14)
        y -= 20

        _draw_text(pdf, f"Venue: {document.event_venue}", y, REGULAR_FONT, 14)
        y -= 40

        if document.user_name:
            _draw_text(pdf, ISSUED_TO_LABEL, y, BOLD_FONT, 12, MUTED)
            y -= 20
            _draw_text(pdf, document.user_name, y, REGULAR_FONT, 14)

        payload = build_ticket_payload(document.event_name, document.order_id)
        qr_image = generate_qr_image(payload, QR_IMAGE_SIZE)
        pdf.drawImage(
            ImageReader(qr_image),
            PAGE_WIDTH / 2 - QR_IMAGE_SIZE / 2,
            y - 250,
            width=QR_IMAGE_SIZE,
            height=QR_IMAGE_SIZE,
        )

        pdf.setFont(REGULAR_FONT, 12)
        pdf.setFillColor(DARK)
        pdf.drawString(PAGE_WIDTH / 2 - 150, y - 270, INSTRUCTIONS)

        pdf.showPage()
        pdf.save()
    except Exception as e:
        logger.error(f"Failed to render ticket for '{document.event_name}': {str(e)}")
        raise RenderError("Failed to render ticket document") from e

    return buffer.getvalue()
