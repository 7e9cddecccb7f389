from datetime import timedelta
from fastapi import Depends, Request

from app.core.config import settings
from app.core.database import SessionLocal
from app.services.ticket_service import TicketService
from app.services.verification_service import VerificationFlow, VerificationService
from app.services.verification_store import (
    DatabaseVerificationCodeStore,
    InMemoryVerificationCodeStore,
    VerificationCodeStore,
)
from app.utils.email_service import EmailService

REGISTRATION = "registration"
PASSWORD_RESET = "password_reset"


def create_verification_store(purpose: str) -> VerificationCodeStore:
    backend = settings.VERIFICATION_STORE_BACKEND.lower()
    if backend == "database":
        return DatabaseVerificationCodeStore(
            SessionLocal,
            purpose=purpose,
            code_length=settings.VERIFICATION_CODE_LENGTH
        )
    if backend != "memory":
        raise ValueError(f"Unknown VERIFICATION_STORE_BACKEND '{backend}'")
    return InMemoryVerificationCodeStore(purpose=purpose, code_length=settings.VERIFICATION_CODE_LENGTH)


def registration_flow() -> VerificationFlow:
    return VerificationFlow(
        name=REGISTRATION,
        ttl=timedelta(minutes=settings.REGISTRATION_CODE_TTL_MINUTES),
        subject="Verification code - Account registration | Nexivent",
        heading="Confirm your email address"
    )


def password_reset_flow() -> VerificationFlow:
    return VerificationFlow(
        name=PASSWORD_RESET,
        ttl=timedelta(minutes=settings.PASSWORD_RESET_CODE_TTL_MINUTES),
        subject="Verification code - Password change | Nexivent",
        heading="Password change verification"
    )


def get_email_service() -> EmailService:
    return EmailService()


def get_verification_store(request: Request, purpose: str) -> VerificationCodeStore:
    return request.app.state.verification_stores[purpose]


def get_registration_service(
    request: Request,
    email_service: EmailService = Depends(get_email_service)
) -> VerificationService:
    return VerificationService(
        get_verification_store(request, REGISTRATION),
        registration_flow(),
        email_service
    )


def get_password_reset_service(
    request: Request,
    email_service: EmailService = Depends(get_email_service)
) -> VerificationService:
    return VerificationService(
        get_verification_store(request, PASSWORD_RESET),
        password_reset_flow(),
        email_service
    )


def get_ticket_service(email_service: EmailService = Depends(get_email_service)) -> TicketService:
    return TicketService(email_service)
