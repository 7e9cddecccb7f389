from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class TicketEmailRequest(BaseModel):
    eventName: str = Field(..., max_length=255)
    eventDate: str = Field("", max_length=100)
    eventVenue: str = Field("", max_length=255)
    userEmail: EmailStr
    userName: Optional[str] = Field(None, max_length=255)
    orderId: Optional[str] = Field(None, max_length=100)
