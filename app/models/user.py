from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, Integer, DateTime
from sqlalchemy.sql import func
from app.database.connection import Base


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    is_email_verified = Column(Boolean, default=False, nullable=False)

    # Registration OTP (SHA-256 digest, never the code itself)
    email_otp_hash = Column(String, nullable=True)
    email_otp_expires_at = Column(DateTime(timezone=True), nullable=True)
    email_otp_attempts = Column(Integer, default=0, nullable=False)

    reset_password_token_hash = Column(String, nullable=True)
    reset_password_expires_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow)
