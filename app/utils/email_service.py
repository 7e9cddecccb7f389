from app.core.config import settings
from app.core.exceptions import DeliveryError
import html
import logging
import smtplib
from dataclasses import dataclass
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.mime.application import MIMEApplication
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates" / "emails"


@dataclass(frozen=True)
class EmailAttachment:
    filename: str
    content: bytes
    content_type: str = "application/pdf"


def render_template(name: str, context: Dict[str, str]) -> str:
    """Load an email template and substitute its {{ key }} placeholders with HTML-escaped values."""
    template_path = TEMPLATES_DIR / name
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")

    html_content = template_path.read_text(encoding="utf-8")
    for key, value in context.items():
        html_content = html_content.replace('{{ ' + key + ' }}', html.escape(value))
    return html_content


class EmailService:
    def __init__(self):
        self.mode = settings.EMAIL_MODE.lower()

        if self.mode not in ["mock", "smtp"]:
            logger.warning(f"Invalid EMAIL_MODE '{self.mode}', defaulting to 'mock'")
            self.mode = "mock"

        logger.info(f"EmailService initialized in '{self.mode}' mode")

    def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        attachments: Optional[List[EmailAttachment]] = None
    ) -> None:
        """
        Deliver a message through the configured transport.

        A single attempt is made; any transport failure is raised as
        DeliveryError so callers can report it.
        """
        if self.mode == "smtp":
            self._send_smtp_email(to, subject, html, attachments or [])
        else:
            self._print_mock_email(to, subject, html, attachments or [])

    def _send_smtp_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        attachments: List[EmailAttachment]
    ) -> None:
        msg = MIMEMultipart('mixed')
        msg['Subject'] = subject
        msg['From'] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
        msg['To'] = to_email

        msg.attach(MIMEText(html_content, 'html', 'utf-8'))

        for attachment in attachments:
            _, subtype = attachment.content_type.split('/', 1)
            part = MIMEApplication(attachment.content, _subtype=subtype)
            part.add_header('Content-Disposition', 'attachment', filename=attachment.filename)
            msg.attach(part)

        try:
            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as server:
                if settings.SMTP_USE_TLS:
                    server.starttls()

                if settings.SMTP_USER:
                    server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)

                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed for {settings.SMTP_USER}: {str(e)}")
            raise DeliveryError("Email transport rejected the configured credentials") from e
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send SMTP email to {to_email}: {str(e)}")
            raise DeliveryError(f"Failed to send email to {to_email}") from e

        logger.info(f"SMTP email sent successfully to {to_email}")

    def _print_mock_email(
        self,
        to_email: str,
        subject: str,
        content: str,
        attachments: List[EmailAttachment]
    ):
        attachment_lines = "\n".join(
            f"  📎 {a.filename} ({a.content_type}, {len(a.content)} bytes)" for a in attachments
        ) or "  (none)"
        email_display = f"""
╔══════════════════════════════════════════════════════════════════╗
║                    📧 MOCK EMAIL (Console Only)                  ║
╚══════════════════════════════════════════════════════════════════╝

TO: {to_email}
SUBJECT: {subject}
ATTACHMENTS:
{attachment_lines}

{content}

═══════════════════════════════════════════════════════════════════
        """
        logger.info(f"Mock email logged for {to_email}")
        print(email_display)

    def send_verification_code(
        self,
        to_email: str,
        code: str,
        expires_in_minutes: int,
        heading: str,
        subject: str,
        name: Optional[str] = None
    ) -> None:
        html_content = render_template("verification_code.html", {
            "heading": heading,
            "greeting": f"Hi {name}," if name else "Hi,",
            "code": code,
            "expires_in": f"{expires_in_minutes} minute{'s' if expires_in_minutes != 1 else ''}",
        })
        self.send_email(to_email, subject, html_content)

    def send_ticket(
        self,
        to_email: str,
        event_name: str,
        pdf_bytes: bytes,
        user_name: Optional[str] = None
    ) -> None:
        html_content = render_template("ticket_delivery.html", {
            "user_name": user_name or "",
            "event_name": event_name,
        })
        self.send_email(
            to=to_email,
            subject=f"Your tickets for: {event_name}",
            html=html_content,
            attachments=[EmailAttachment(filename="ticket.pdf", content=pdf_bytes)]
        )

    def send_welcome(self, to_email: str, name: str) -> None:
        html_content = render_template("welcome.html", {"user_name": name})
        self.send_email(to_email, f"Welcome to Nexivent, {name}!", html_content)
