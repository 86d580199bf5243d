from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Salt for OTP / reset token digests (falls back to SECRET_KEY)
    OTP_SECRET: Optional[str] = None

    # Comma-separated list; the first entry is used to build links in emails
    FRONTEND_ORIGIN: str = "http://localhost:3000"

    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    MAIL_FROM_NAME: str = "bayut"

    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def frontend_origin_list(self) -> list[str]:
        """Allowed CORS origins from FRONTEND_ORIGIN"""
        return [o.strip() for o in self.FRONTEND_ORIGIN.split(",") if o.strip()]

    @property
    def frontend_base_url(self) -> str:
        origins = self.frontend_origin_list
        return origins[0] if origins else "http://localhost:3000"

    @property
    def otp_secret(self) -> str:
        return self.OTP_SECRET or self.SECRET_KEY


settings = Settings()
