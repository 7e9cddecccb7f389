"""
Email adapter tests (mock and SMTP transports).
"""
import smtplib
import pytest
from email import message_from_bytes
from unittest.mock import MagicMock, patch
from app.core.exceptions import DeliveryError
from app.utils.email_service import EmailAttachment, EmailService, render_template


@pytest.fixture
def smtp_settings(monkeypatch):
    monkeypatch.setattr("app.utils.email_service.settings.EMAIL_MODE", "smtp")
    monkeypatch.setattr("app.utils.email_service.settings.SMTP_USER", "sender@example.com")
    monkeypatch.setattr("app.utils.email_service.settings.SMTP_PASSWORD", "app-password")


@pytest.fixture
def smtp_server():
    with patch("app.utils.email_service.smtplib.SMTP") as smtp:
        server = MagicMock()
        smtp.return_value.__enter__.return_value = server
        yield server


class TestTemplates:

    def test_placeholders_are_replaced(self):
        html = render_template("verification_code.html", {
            "heading": "Confirm",
            "greeting": "Hi Ada,",
            "code": "123456",
            "expires_in": "15 minutes",
        })
        assert "123456" in html
        assert "Hi Ada," in html
        assert "{{" not in html

    def test_values_are_html_escaped(self):
        html = render_template("welcome.html", {
            "user_name": '<a href="https://evil.example">Click to reset</a>',
        })
        assert '<a href=' not in html
        assert "&lt;a href=&quot;https://evil.example&quot;&gt;" in html

    def test_missing_template(self):
        with pytest.raises(FileNotFoundError):
            render_template("nope.html", {})


class TestMockMode:

    def test_invalid_mode_falls_back_to_mock(self, monkeypatch):
        monkeypatch.setattr("app.utils.email_service.settings.EMAIL_MODE", "carrier-pigeon")
        assert EmailService().mode == "mock"

    def test_mock_mode_prints(self, monkeypatch, capsys):
        monkeypatch.setattr("app.utils.email_service.settings.EMAIL_MODE", "mock")
        EmailService().send_email("fan@example.com", "Hello", "<p>Hi</p>")

        out = capsys.readouterr().out
        assert "fan@example.com" in out
        assert "Hello" in out


class TestSmtpMode:

    def test_sends_html_with_attachment(self, smtp_settings, smtp_server):
        EmailService().send_ticket("fan@example.com", "Showcase", b"%PDF-1.4 fake", user_name="Ada")

        smtp_server.starttls.assert_called_once()
        smtp_server.login.assert_called_once_with("sender@example.com", "app-password")
        msg = smtp_server.send_message.call_args.args[0]
        assert msg["To"] == "fan@example.com"
        assert msg["Subject"] == "Your tickets for: Showcase"

        parsed = message_from_bytes(msg.as_bytes())
        attachments = [p for p in parsed.walk() if p.get_filename() == "ticket.pdf"]
        assert len(attachments) == 1
        assert attachments[0].get_content_type() == "application/pdf"
        assert attachments[0].get_payload(decode=True) == b"%PDF-1.4 fake"

    def test_verification_email_contains_code(self, smtp_settings, smtp_server):
        EmailService().send_verification_code(
            to_email="fan@example.com",
            code="042042",
            expires_in_minutes=1,
            heading="Password change verification",
            subject="Verification code",
        )

        msg = smtp_server.send_message.call_args.args[0]
        body = message_from_bytes(msg.as_bytes()).get_payload()[0].get_payload(decode=True).decode()
        assert "042042" in body
        assert "1 minute" in body

    def test_transport_failure_raises_delivery_error(self, smtp_settings, smtp_server):
        smtp_server.send_message.side_effect = smtplib.SMTPRecipientsRefused({})

        with pytest.raises(DeliveryError):
            EmailService().send_email("fan@example.com", "Hi", "<p>Hi</p>")

    def test_auth_failure_raises_delivery_error(self, smtp_settings, smtp_server):
        smtp_server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")

        with pytest.raises(DeliveryError):
            EmailService().send_email(
                "fan@example.com", "Hi", "<p>Hi</p>",
                attachments=[EmailAttachment("ticket.pdf", b"x")]
            )

    def test_connection_failure_raises_delivery_error(self, smtp_settings):
        with patch("app.utils.email_service.smtplib.SMTP", side_effect=ConnectionRefusedError()):
            with pytest.raises(DeliveryError):
                EmailService().send_email("fan@example.com", "Hi", "<p>Hi</p>")

    def test_verification_email_escapes_name(self, smtp_settings, smtp_server):
        EmailService().send_verification_code(
            to_email="fan@example.com",
            code="042042",
            expires_in_minutes=1,
            heading="Password change verification",
            subject="Verification code",
            name='<a href="https://evil.example">Click to reset</a>',
        )

        msg = smtp_server.send_message.call_args.args[0]
        body = message_from_bytes(msg.as_bytes()).get_payload()[0].get_payload(decode=True).decode()
        assert '<a href=' not in body
        assert "Hi &lt;a href=" in body
