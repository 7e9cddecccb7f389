from pydantic import BaseModel, EmailStr, Field


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str
    version: str


class WelcomeRequest(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
