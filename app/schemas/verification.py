from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional


class CodeSendRequest(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=255)

    @validator('email')
    def normalize_email(cls, v):
        return v.lower()


class CodeSendResponse(BaseModel):
    success: bool = True
    message: str
    expiresInSeconds: int


class CodeVerifyRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., min_length=1, max_length=12, pattern=r"^[0-9]+$")

    @validator('email')
    def normalize_email(cls, v):
        return v.lower()

    @validator('code', pre=True)
    def strip_code(cls, v):
        return v.strip() if isinstance(v, str) else v


class CodeVerifyResponse(BaseModel):
    success: bool = True
    verified: bool
    message: str
