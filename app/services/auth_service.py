"""
Auth Service - registration with email OTP, login and password reset
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlencode
from sqlalchemy import select, update, and_
from app.config import settings
from app.database.connection import AsyncSessionLocal
from app.models.user import User
from app.services import mailer_service
from app.services.email_templates import otp_email_html, verified_email_html, reset_password_email_html
from app.utils.errors import AuthenticationError, BadRequestError, ConflictError, NotFoundError
from app.utils.security import (
    create_access_token,
    generate_otp,
    generate_reset_token,
    get_password_hash,
    hash_secret,
    verify_password,
)

logger = logging.getLogger(__name__)

OTP_TTL_MINUTES = 5
OTP_MAX_ATTEMPTS = 5
RESET_TOKEN_TTL_MINUTES = 30


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_expired(expires_at: Optional[datetime]) -> bool:
    return expires_at is None or _as_utc(expires_at) < _now()


def _sign_access_token(user: User) -> str:
    return create_access_token(data={"sub": user.id, "email": user.email})


def _user_summary(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


async def _get_user_by_email(session, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def _send_otp(email: str, otp: str) -> None:
    await mailer_service.send_html(
        email,
        "Your Bayut verification code",
        otp_email_html(otp, OTP_TTL_MINUTES),
    )


async def register_start(email: str, password: str, name: str, phone: str) -> dict:
    """Create (or refresh) an unverified account and email it a verification code"""
    email = normalize_email(email)
    otp = generate_otp()

    async with AsyncSessionLocal() as session:
        user = await _get_user_by_email(session, email)
        if user and user.is_email_verified:
            raise ConflictError("Email already registered")

        if user is None:
            user = User(
                id=str(uuid.uuid4()),
                email=email,
                is_email_verified=False,
            )
            session.add(user)

        user.hashed_password = get_password_hash(password)
        user.name = name
        user.phone = phone
        user.email_otp_hash = hash_secret(otp)
        user.email_otp_expires_at = _now() + timedelta(minutes=OTP_TTL_MINUTES)
        user.email_otp_attempts = 0

        await session.commit()

        result = {
            "user": {
                "id": user.id,
                "email": user.email,
                "name": user.name,
                "phone": user.phone,
            },
            "otp_sent": True,
        }

    logger.info(f"Registration OTP issued for {email}")
    await _send_otp(email, otp)
    return result


async def resend_otp(email: str) -> dict:
    """Reissue the verification code for an account that is not verified yet"""
    email = normalize_email(email)

    async with AsyncSessionLocal() as session:
        user = await _get_user_by_email(session, email)
        if not user:
            raise BadRequestError("Invalid email")
        if user.is_email_verified:
            return {"otp_sent": False, "message": "Email already verified"}

        otp = generate_otp()
        user.email_otp_hash = hash_secret(otp)
        user.email_otp_expires_at = _now() + timedelta(minutes=OTP_TTL_MINUTES)
        user.email_otp_attempts = 0
        await session.commit()

    logger.info(f"Registration OTP re-issued for {email}")
    await _send_otp(email, otp)
    return {"otp_sent": True}


async def register_verify(email: str, otp: str) -> dict:
    """
    Check a registration OTP.

    Fails closed when no code was issued, after OTP_MAX_ATTEMPTS wrong guesses
    (until a resend) or once the code expired. A wrong guess counts as an attempt.
    """
    email = normalize_email(email)
    otp = otp.strip()

    async with AsyncSessionLocal() as session:
        user = await _get_user_by_email(session, email)
        if not user:
            raise BadRequestError("Invalid email")

        if user.is_email_verified:
            return {
                "user": _user_summary(user),
                "access_token": _sign_access_token(user),
                "verified": True,
            }

        if not user.email_otp_hash or not user.email_otp_expires_at:
            raise BadRequestError("OTP not requested")
        if (user.email_otp_attempts or 0) >= OTP_MAX_ATTEMPTS:
            raise BadRequestError("Too many attempts. Please resend OTP.")
        if _is_expired(user.email_otp_expires_at):
            raise BadRequestError("OTP expired. Please resend OTP.")

        otp_hash = hash_secret(otp)
        # check and write in a single UPDATE; attempts never pass OTP_MAX_ATTEMPTS
        under_limit = and_(User.id == user.id, User.email_otp_attempts < OTP_MAX_ATTEMPTS)

        if user.email_otp_hash != otp_hash:
            counted = await session.execute(
                update(User)
                .where(under_limit)
                .values(email_otp_attempts=User.email_otp_attempts + 1)
            )
            await session.commit()
            if counted.rowcount == 0:
                raise BadRequestError("Too many attempts. Please resend OTP.")
            logger.warning(f"Invalid OTP for {email}")
            raise BadRequestError("Invalid OTP")

        verified = await session.execute(
            update(User)
            .where(under_limit, User.email_otp_hash == otp_hash)
            .values(
                is_email_verified=True,
                email_otp_hash=None,
                email_otp_expires_at=None,
                email_otp_attempts=0,
            )
        )
        await session.commit()
        if verified.rowcount == 0:
            raise BadRequestError("Too many attempts. Please resend OTP.")

        result = {
            "user": _user_summary(user),
            "access_token": _sign_access_token(user),
            "verified": True,
        }

    logger.info(f"Email verified for {email}")
    await mailer_service.send_html(email, "Your email has been verified", verified_email_html())
    return result


async def login(email: str, password: str) -> dict:
    email = normalize_email(email)

    async with AsyncSessionLocal() as session:
        user = await _get_user_by_email(session, email)
        if not user:
            raise AuthenticationError("Invalid credentials")
        if not user.is_email_verified:
            raise AuthenticationError("Email not verified")
        if not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid credentials")

        return {
            "user": _user_summary(user),
            "access_token": _sign_access_token(user),
        }


async def forgot_password(email: str) -> dict:
    """Store a hashed single-use reset token and email the reset link"""
    email = normalize_email(email)
    token = generate_reset_token()

    async with AsyncSessionLocal() as session:
        user = await _get_user_by_email(session, email)
        if not user:
            raise NotFoundError("No account found for this email")

        user.reset_password_token_hash = hash_secret(token)
        user.reset_password_expires_at = _now() + timedelta(minutes=RESET_TOKEN_TTL_MINUTES)
        await session.commit()

    reset_url = f"{settings.frontend_base_url}/reset-password?{urlencode({'email': email, 'token': token})}"
    logger.info(f"Password reset requested for {email}")
    await mailer_service.send_html(
        email,
        "Reset your Bayut password",
        reset_password_email_html(reset_url, RESET_TOKEN_TTL_MINUTES),
    )
    return {"requested": True}


async def reset_password(email: str, token: str, new_password: str) -> dict:
    email = normalize_email(email)

    async with AsyncSessionLocal() as session:
        user = await _get_user_by_email(session, email)
        if not user:
            raise BadRequestError("Invalid reset link")

        if not user.reset_password_token_hash or _is_expired(user.reset_password_expires_at):
            raise BadRequestError("Reset link expired. Please request again.")

        if user.reset_password_token_hash != hash_secret(token.strip()):
            raise BadRequestError("Invalid reset link")

        user.hashed_password = get_password_hash(new_password)
        user.reset_password_token_hash = None
        user.reset_password_expires_at = None
        await session.commit()

    logger.info(f"Password reset completed for {email}")
    return {"reset": True}


async def get_me(user_id: str) -> dict:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            raise AuthenticationError("Invalid credentials")

        return {
            "user": {
                "user_id": user.id,
                "email": user.email,
                "name": user.name,
                "phone": user.phone,
                "is_email_verified": user.is_email_verified,
            }
        }
