from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_password_reset_service, get_registration_service
from app.schemas.verification import (
    CodeSendRequest,
    CodeSendResponse,
    CodeVerifyRequest,
    CodeVerifyResponse,
)
from app.services.verification_service import VerificationService

password_router = APIRouter(prefix="/api/password", tags=["Password"])
registration_router = APIRouter(prefix="/api/registration", tags=["Registration"])


@password_router.post("/send-code", response_model=CodeSendResponse, status_code=status.HTTP_200_OK)
def send_password_code(
    payload: CodeSendRequest,
    service: VerificationService = Depends(get_password_reset_service)
):
    """Email a short-lived code that authorizes a password change."""
    expires_in = service.send_code(payload.email, payload.name)
    return CodeSendResponse(message="Verification code sent", expiresInSeconds=expires_in)


@password_router.post("/verify-code", response_model=CodeVerifyResponse)
def verify_password_code(
    payload: CodeVerifyRequest,
    service: VerificationService = Depends(get_password_reset_service)
):
    verified = service.verify_code(payload.email, payload.code)
    return CodeVerifyResponse(verified=verified, message="Code verified successfully")


@registration_router.post("/send-code", response_model=CodeSendResponse, status_code=status.HTTP_200_OK)
def send_registration_code(
    payload: CodeSendRequest,
    service: VerificationService = Depends(get_registration_service)
):
    """Email the code that confirms ownership of the address used to sign up."""
    expires_in = service.send_code(payload.email, payload.name)
    return CodeSendResponse(message="Verification code sent", expiresInSeconds=expires_in)


@registration_router.post("/verify-code", response_model=CodeVerifyResponse)
def verify_registration_code(
    payload: CodeVerifyRequest,
    service: VerificationService = Depends(get_registration_service)
):
    verified = service.verify_code(payload.email, payload.code)
    return CodeVerifyResponse(verified=verified, message="Code verified successfully")
