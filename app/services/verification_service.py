from datetime import timedelta
from typing import Optional
from fastapi import HTTPException, status
import logging

from app.core.exceptions import (
    CodeExpiredError,
    CodeMismatchError,
    CodeNotFoundError,
    DeliveryError,
    InvalidArgumentError,
)
from app.services.verification_store import VerificationCodeStore
from app.utils.email_service import EmailService

logger = logging.getLogger(__name__)

INVALID_CODE_MESSAGE = "Invalid or expired verification code."
EXPIRED_CODE_MESSAGE = "The verification code has expired. Please request a new one."


class VerificationFlow:
    """Per-flow settings: time-to-live and the wording of the outgoing email."""

    def __init__(self, name: str, ttl: timedelta, subject: str, heading: str):
        self.name = name
        self.ttl = ttl
        self.subject = subject
        self.heading = heading

    @property
    def ttl_minutes(self) -> int:
        return max(1, int(self.ttl.total_seconds()) // 60)


class VerificationService:

    def __init__(self, store: VerificationCodeStore, flow: VerificationFlow, email_service: EmailService):
        self.store = store
        self.flow = flow
        self.email_service = email_service

    def send_code(self, email: str, name: Optional[str] = None) -> int:
        """Issue a fresh code for ``email`` and mail it. Returns the TTL in seconds."""
        try:
            code = self.store.issue(email, self.flow.ttl)
        except InvalidArgumentError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e)
            )

        try:
            self.email_service.send_verification_code(
                to_email=email,
                code=code,
                expires_in_minutes=self.flow.ttl_minutes,
                heading=self.flow.heading,
                subject=self.flow.subject,
                name=name
            )
        except DeliveryError:
            logger.error(f"Could not deliver {self.flow.name} code to {email}")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Could not send the verification email. Please try again later."
            )

        return int(self.flow.ttl.total_seconds())

    def verify_code(self, email: str, code: str) -> bool:
        try:
            self.store.redeem(email, code)
        except CodeNotFoundError:
            logger.info(f"{self.flow.name} verification for {email}: no pending code")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=INVALID_CODE_MESSAGE
            )
        except CodeMismatchError:
            logger.warning(f"{self.flow.name} verification for {email}: incorrect code")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=INVALID_CODE_MESSAGE
            )
        except CodeExpiredError:
            logger.info(f"{self.flow.name} verification for {email}: code expired")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=EXPIRED_CODE_MESSAGE
            )
        except InvalidArgumentError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e)
            )

        return True
