"""
Ticket document endpoint tests.
"""
from fastapi import status
from app.core.exceptions import DeliveryError


# =============================================================================
# TEST: Download (GET /api/tickets/download)
# =============================================================================
class TestDownloadTicket:

    def test_download_returns_pdf_attachment(self, client):
        response = client.get(
            "/api/tickets/download",
            params={"eventName": "Showcase", "eventWhen": "2025-09-21", "eventVenue": "Royal Albert Hall"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="ticket-showcase.pdf"'
        assert response.content.startswith(b"%PDF-")

    def test_download_uses_placeholders(self, client):
        response = client.get("/api/tickets/download")

        assert response.status_code == status.HTTP_200_OK
        assert 'filename="ticket-event.pdf"' in response.headers["content-disposition"]

    def test_download_filename_is_slugified(self, client):
        response = client.get("/api/tickets/download", params={"eventName": "Rock & Roll Night!"})
        assert 'filename="ticket-rock-roll-night.pdf"' in response.headers["content-disposition"]

    def test_download_empty_event_name(self, client):
        """An empty event name is a render error, reported without internals."""
        response = client.get("/api/tickets/download", params={"eventName": ""})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == "Could not generate ticket document"


# =============================================================================
# TEST: Email (POST /api/tickets/send-email)
# =============================================================================
class TestSendTicketEmail:

    def test_send_ticket_email_success(self, client, mock_email_service):
        response = client.post(
            "/api/tickets/send-email",
            json={
                "eventName": "Showcase",
                "eventDate": "2025-09-21",
                "eventVenue": "Royal Albert Hall",
                "userEmail": "fan@example.com",
                "userName": "Ada",
                "orderId": "ORD-1"
            }
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True

        kwargs = mock_email_service.send_ticket.call_args.kwargs
        assert kwargs["to_email"] == "fan@example.com"
        assert kwargs["event_name"] == "Showcase"
        assert kwargs["user_name"] == "Ada"
        assert kwargs["pdf_bytes"].startswith(b"%PDF-")

    def test_send_ticket_email_missing_recipient(self, client, mock_email_service):
        response = client.post("/api/tickets/send-email", json={"eventName": "Showcase"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        mock_email_service.send_ticket.assert_not_called()

    def test_send_ticket_email_blank_event(self, client, mock_email_service):
        response = client.post(
            "/api/tickets/send-email",
            json={"eventName": " ", "userEmail": "fan@example.com"}
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        mock_email_service.send_ticket.assert_not_called()

    def test_send_ticket_email_delivery_failure(self, client, mock_email_service):
        mock_email_service.send_ticket.side_effect = DeliveryError("rejected")

        response = client.post(
            "/api/tickets/send-email",
            json={"eventName": "Showcase", "userEmail": "fan@example.com"}
        )

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json()["detail"] == "Could not send email"


# =============================================================================
# TEST: Welcome (POST /api/welcome)
# =============================================================================
class TestWelcome:

    def test_welcome_success(self, client, mock_email_service):
        response = client.post("/api/welcome", json={"email": "fan@example.com", "name": "Ada"})

        assert response.status_code == status.HTTP_200_OK
        mock_email_service.send_welcome.assert_called_once_with("fan@example.com", "Ada")

    def test_welcome_requires_name(self, client):
        response = client.post("/api/welcome", json={"email": "fan@example.com"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
