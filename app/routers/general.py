from fastapi import APIRouter, Depends, HTTPException, status

from app.core.config import settings
from app.core.dependencies import get_email_service
from app.core.exceptions import DeliveryError
from app.schemas.common import HealthResponse, MessageResponse, WelcomeRequest
from app.utils.email_service import EmailService

router = APIRouter(prefix="/api", tags=["General"])


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(service=settings.APP_NAME, version=settings.APP_VERSION)


@router.post("/welcome", response_model=MessageResponse)
def send_welcome(
    payload: WelcomeRequest,
    email_service: EmailService = Depends(get_email_service)
):
    try:
        email_service.send_welcome(payload.email, payload.name)
    except DeliveryError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not send email"
        )
    return MessageResponse(message="Welcome email sent")
