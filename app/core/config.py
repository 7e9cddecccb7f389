from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Nexivent API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./nexivent.db"

    # Verification codes
    VERIFICATION_STORE_BACKEND: str = "memory"
    VERIFICATION_CODE_LENGTH: int = 6
    REGISTRATION_CODE_TTL_MINUTES: int = 15
    PASSWORD_RESET_CODE_TTL_MINUTES: int = 1
    VERIFICATION_REAPER_INTERVAL_SECONDS: int = 60

    # Email
    EMAIL_MODE: str = "mock"
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USE_TLS: bool = True
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM_NAME: str = "Nexivent"
    SMTP_FROM_EMAIL: str = "no-reply@nexivent.com"

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]


settings = Settings()
