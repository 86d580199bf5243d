"""
Test Case Suite: Authentication Module
Test ID Range: TC-001 to TC-020, TC-066 to TC-068

This test suite validates registration with email OTP, login, the password
reset flow and the current-user endpoint.
"""

import asyncio
import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from app.database.connection import Base
from app.models.user import User
from app.services import auth_service
from app.utils.errors import BadRequestError
from app.utils.security import hash_secret

TEST_PASSWORD = "StrongPass123"

OTP = "4321"
RESET_TOKEN = "ab" * 32

REGISTRATION = {
    "email": "New.Owner@Example.com",
    "password": "Password1",
    "name": "New Owner",
    "phone": "+971501112233",
}


async def _load_user(db_session, email: str) -> User:
    result = await db_session.execute(select(User).where(User.email == email))
    return result.scalar_one()


@pytest.fixture
def fixed_otp():
    with patch("app.services.auth_service.generate_otp", return_value=OTP):
        yield OTP


class TestRegistration:
    """
    Test Case TC-001: Start Registration
    Description: Verify that registering stores an unverified user with a hashed OTP and emails the code
    Expected Result: Returns 200 with otpSent=true; email lower-cased; OTP never stored in clear
    """
    @pytest.mark.asyncio
    async def test_tc001_register_start_issues_otp(self, client: AsyncClient, db_session, mailer, fixed_otp):
        """TC-001: Start registration"""
        response = await client.post("/auth/register/start", json=REGISTRATION)

        assert response.status_code == 200
        data = response.json()
        assert data["otpSent"] is True
        assert data["user"]["email"] == "new.owner@example.com"
        assert data["user"]["phone"] == REGISTRATION["phone"]

        user = await _load_user(db_session, "new.owner@example.com")
        assert user.is_email_verified is False
        assert user.email_otp_hash == hash_secret(OTP)
        assert user.email_otp_hash != OTP
        assert user.email_otp_attempts == 0

        mailer.assert_awaited_once()
        to, subject, html = mailer.await_args.args
        assert to == "new.owner@example.com"
        assert "4 3 2 1" in html

    """
    Test Case TC-002: Register With Weak Password
    Description: Verify that passwords without a digit are rejected by validation
    Expected Result: Returns 422
    """
    @pytest.mark.asyncio
    async def test_tc002_register_weak_password(self, client: AsyncClient):
        """TC-002: Register with weak password"""
        response = await client.post("/auth/register/start", json={**REGISTRATION, "password": "onlyletters"})
        assert response.status_code == 422

    """
    Test Case TC-003: Register With Invalid Phone
    Description: Verify that phone numbers must be 9-15 digits
    Expected Result: Returns 422
    """
    @pytest.mark.asyncio
    async def test_tc003_register_invalid_phone(self, client: AsyncClient):
        """TC-003: Register with invalid phone"""
        response = await client.post("/auth/register/start", json={**REGISTRATION, "phone": "12-34"})
        assert response.status_code == 422

    """
    Test Case TC-004: Register Already Verified Email
    Description: Verify that a verified account cannot be registered again
    Expected Result: Returns 409
    """
    @pytest.mark.asyncio
    async def test_tc004_register_duplicate_verified_email(self, client: AsyncClient, verified_user):
        """TC-004: Register duplicate email"""
        response = await client.post(
            "/auth/register/start",
            json={**REGISTRATION, "email": verified_user["email"].upper()},
        )
        assert response.status_code == 409

    """
    Test Case TC-005: Verify With Correct OTP
    Description: Verify that the right code marks the email verified and returns a token
    Expected Result: Returns 200 with accessToken; OTP fields cleared
    """
    @pytest.mark.asyncio
    async def test_tc005_verify_correct_otp(self, client: AsyncClient, db_session, mailer, fixed_otp):
        """TC-005: Verify with correct OTP"""
        await client.post("/auth/register/start", json=REGISTRATION)

        response = await client.post("/auth/register/verify", json={"email": REGISTRATION["email"], "otp": OTP})

        assert response.status_code == 200
        data = response.json()
        assert data["verified"] is True
        assert data["accessToken"]
        assert data["user"]["email"] == "new.owner@example.com"

        user = await _load_user(db_session, "new.owner@example.com")
        assert user.is_email_verified is True
        assert user.email_otp_hash is None
        assert user.email_otp_expires_at is None
        assert mailer.await_count == 2

    """
    Test Case TC-006: Verify Locks After Five Wrong Attempts
    Description: Verify that after 5 wrong codes even the correct code is rejected
    Expected Result: Five 400 "Invalid OTP" responses, then 400 "Too many attempts"
    """
    @pytest.mark.asyncio
    async def test_tc006_verify_locks_after_five_attempts(self, client: AsyncClient, db_session, fixed_otp):
        """TC-006: OTP attempt limit"""
        await client.post("/auth/register/start", json=REGISTRATION)

        for _ in range(5):
            response = await client.post("/auth/register/verify", json={"email": REGISTRATION["email"], "otp": "0000"})
            assert response.status_code == 400
            assert response.json()["detail"] == "Invalid OTP"

        response = await client.post("/auth/register/verify", json={"email": REGISTRATION["email"], "otp": OTP})
        assert response.status_code == 400
        assert "too many attempts" in response.json()["detail"].lower()

        user = await _load_user(db_session, "new.owner@example.com")
        assert user.is_email_verified is False
        assert user.email_otp_attempts == 5

    """
    Test Case TC-007: Resend Unlocks Verification
    Description: Verify that resending an OTP resets the attempt counter
    Expected Result: Correct code after resend returns 200
    """
    @pytest.mark.asyncio
    async def test_tc007_resend_resets_attempts(self, client: AsyncClient, fixed_otp):
        """TC-007: Resend OTP"""
        await client.post("/auth/register/start", json=REGISTRATION)
        for _ in range(5):
            await client.post("/auth/register/verify", json={"email": REGISTRATION["email"], "otp": "0000"})

        resend = await client.post("/auth/register/resend", json={"email": REGISTRATION["email"]})
        assert resend.status_code == 200
        assert resend.json()["otpSent"] is True

        response = await client.post("/auth/register/verify", json={"email": REGISTRATION["email"], "otp": OTP})
        assert response.status_code == 200

    """
    Test Case TC-008: Verify Expired OTP
    Description: Verify that a code is rejected once its 5 minute window elapsed
    Expected Result: Returns 400 mentioning expiry
    """
    @pytest.mark.asyncio
    async def test_tc008_verify_expired_otp(self, client: AsyncClient, fixed_otp):
        """TC-008: Expired OTP"""
        await client.post("/auth/register/start", json=REGISTRATION)

        later = datetime.now(timezone.utc) + timedelta(minutes=6)
        with patch("app.services.auth_service._now", return_value=later):
            response = await client.post("/auth/register/verify", json={"email": REGISTRATION["email"], "otp": OTP})

        assert response.status_code == 400
        assert "expired" in response.json()["detail"].lower()

    """
    Test Case TC-009: Resend For Verified Account
    Description: Verify that no new code is issued once the email is verified
    Expected Result: Returns 200 with otpSent=false
    """
    @pytest.mark.asyncio
    async def test_tc009_resend_for_verified_account(self, client: AsyncClient, verified_user, mailer):
        """TC-009: Resend for verified account"""
        response = await client.post("/auth/register/resend", json={"email": verified_user["email"]})

        assert response.status_code == 200
        assert response.json()["otpSent"] is False
        mailer.assert_not_awaited()

    """
    Test Case TC-010: Resend For Unknown Email
    Description: Verify that resending for an unknown address fails
    Expected Result: Returns 400
    """
    @pytest.mark.asyncio
    async def test_tc010_resend_unknown_email(self, client: AsyncClient):
        """TC-010: Resend for unknown email"""
        response = await client.post("/auth/register/resend", json={"email": "ghost@example.com"})
        assert response.status_code == 400


class TestLogin:
    """
    Test Case TC-011: Login With Valid Credentials
    Description: Verify that a verified user can log in
    Expected Result: Returns 200 with accessToken
    """
    @pytest.mark.asyncio
    async def test_tc011_login_valid_credentials(self, client: AsyncClient, verified_user):
        """TC-011: Login with valid credentials"""
        response = await client.post("/auth/login", json={
            "email": verified_user["email"],
            "password": TEST_PASSWORD,
        })

        assert response.status_code == 200
        data = response.json()
        assert len(data["accessToken"]) > 0
        assert data["user"]["id"] == verified_user["id"]

    """
    Test Case TC-012: Login With Wrong Password
    Description: Verify that login fails with a wrong password
    Expected Result: Returns 401
    """
    @pytest.mark.asyncio
    async def test_tc012_login_wrong_password(self, client: AsyncClient, verified_user):
        """TC-012: Login with wrong password"""
        response = await client.post("/auth/login", json={
            "email": verified_user["email"],
            "password": "WrongPass99",
        })
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    """
    Test Case TC-013: Login Before Verification
    Description: Verify that unverified accounts cannot log in
    Expected Result: Returns 401 "Email not verified"
    """
    @pytest.mark.asyncio
    async def test_tc013_login_unverified(self, client: AsyncClient, fixed_otp):
        """TC-013: Login before verification"""
        await client.post("/auth/register/start", json=REGISTRATION)

        response = await client.post("/auth/login", json={
            "email": REGISTRATION["email"],
            "password": REGISTRATION["password"],
        })
        assert response.status_code == 401
        assert response.json()["detail"] == "Email not verified"

    """
    Test Case TC-014: Login With Missing Password
    Description: Verify that the request body is validated
    Expected Result: Returns 422
    """
    @pytest.mark.asyncio
    async def test_tc014_login_missing_password(self, client: AsyncClient):
        """TC-014: Login with missing password"""
        response = await client.post("/auth/login", json={"email": "someone@example.com"})
        assert response.status_code == 422


class TestPasswordReset:
    """
    Test Case TC-015: Forgot Password Emails Link
    Description: Verify that a hashed token with expiry is stored and a reset link is emailed
    Expected Result: Returns 200 with requested=true
    """
    @pytest.mark.asyncio
    async def test_tc015_forgot_password(self, client: AsyncClient, db_session, verified_user, mailer):
        """TC-015: Forgot password"""
        with patch("app.services.auth_service.generate_reset_token", return_value=RESET_TOKEN):
            response = await client.post("/auth/password/forgot", json={"email": verified_user["email"]})

        assert response.status_code == 200
        assert response.json()["requested"] is True

        user = await _load_user(db_session, verified_user["email"])
        assert user.reset_password_token_hash == hash_secret(RESET_TOKEN)
        assert user.reset_password_expires_at is not None

        html = mailer.await_args.args[2]
        assert "http://localhost:3000/reset-password?" in html
        assert RESET_TOKEN in html

    """
    Test Case TC-016: Forgot Password For Unknown Email
    Description: Verify that unknown accounts are reported
    Expected Result: Returns 404
    """
    @pytest.mark.asyncio
    async def test_tc016_forgot_password_unknown(self, client: AsyncClient):
        """TC-016: Forgot password for unknown email"""
        response = await client.post("/auth/password/forgot", json={"email": "ghost@example.com"})
        assert response.status_code == 404

    """
    Test Case TC-017: Reset Password With Valid Token
    Description: Verify that the token changes the password and is single-use
    Expected Result: Returns 200; new password logs in; second reset is rejected
    """
    @pytest.mark.asyncio
    async def test_tc017_reset_password_valid(self, client: AsyncClient, verified_user):
        """TC-017: Reset password"""
        with patch("app.services.auth_service.generate_reset_token", return_value=RESET_TOKEN):
            await client.post("/auth/password/forgot", json={"email": verified_user["email"]})

        payload = {"email": verified_user["email"], "token": RESET_TOKEN, "password": "BrandNew123"}
        response = await client.post("/auth/password/reset", json=payload)
        assert response.status_code == 200
        assert response.json()["reset"] is True

        login = await client.post("/auth/login", json={"email": verified_user["email"], "password": "BrandNew123"})
        assert login.status_code == 200

        reused = await client.post("/auth/password/reset", json=payload)
        assert reused.status_code == 400

    """
    Test Case TC-018: Reset Password With Expired Token
    Description: Verify that a token older than 30 minutes is rejected even if it matches
    Expected Result: Returns 400 mentioning expiry
    """
    @pytest.mark.asyncio
    async def test_tc018_reset_password_expired(self, client: AsyncClient, verified_user):
        """TC-018: Expired reset token"""
        with patch("app.services.auth_service.generate_reset_token", return_value=RESET_TOKEN):
            await client.post("/auth/password/forgot", json={"email": verified_user["email"]})

        later = datetime.now(timezone.utc) + timedelta(minutes=31)
        with patch("app.services.auth_service._now", return_value=later):
            response = await client.post("/auth/password/reset", json={
                "email": verified_user["email"],
                "token": RESET_TOKEN,
                "password": "BrandNew123",
            })

        assert response.status_code == 400
        assert "expired" in response.json()["detail"].lower()

    """
    Test Case TC-019: Reset Password With Wrong Token
    Description: Verify that a token that does not match the stored hash is rejected
    Expected Result: Returns 400 "Invalid reset link"
    """
    @pytest.mark.asyncio
    async def test_tc019_reset_password_wrong_token(self, client: AsyncClient, verified_user):
        """TC-019: Wrong reset token"""
        with patch("app.services.auth_service.generate_reset_token", return_value=RESET_TOKEN):
            await client.post("/auth/password/forgot", json={"email": verified_user["email"]})

        response = await client.post("/auth/password/reset", json={
            "email": verified_user["email"],
            "token": "cd" * 32,
            "password": "BrandNew123",
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid reset link"


class TestCurrentUser:
    """
    Test Case TC-020: Get Current User
    Description: Verify that the bearer token resolves to the logged-in user
    Expected Result: Returns 200 with the profile; 401/403 without a token
    """
    @pytest.mark.asyncio
    async def test_tc020_me(self, authenticated_client):
        """TC-020: Current user"""
        client, user = authenticated_client

        response = await client.get("/auth/me")
        assert response.status_code == 200
        data = response.json()["user"]
        assert data["userId"] == user["id"]
        assert data["email"] == user["email"]
        assert data["isEmailVerified"] is True

        client.headers.pop("Authorization")
        anonymous = await client.get("/auth/me")
        assert anonymous.status_code in (401, 403)


@pytest_asyncio.fixture(scope="function")
async def file_session_factory(tmp_path, mailer):
    """Real session-per-call factory over a file database, so guesses run on separate connections"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'otp.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    with patch.object(auth_service, "AsyncSessionLocal", session_factory):
        yield session_factory

    await engine.dispose()


class TestConcurrentVerification:
    """
    Test Case TC-066: Concurrent Wrong Guesses Respect The Attempt Limit
    Description: Verify that a burst of parallel wrong codes records at most 5 attempts
    and that the correct code is refused afterwards
    Expected Result: Every guess rejected; stored attempts == 5; correct code gets "Too many attempts"
    """
    @pytest.mark.asyncio
    async def test_tc066_parallel_wrong_guesses(self, file_session_factory, fixed_otp):
        """TC-066: Parallel wrong OTP guesses"""
        email = "burst@example.com"
        await auth_service.register_start(email, "Password1", "Burst Owner", "+971501112233")

        results = await asyncio.gather(
            *[auth_service.register_verify(email, "0000") for _ in range(10)],
            return_exceptions=True,
        )

        assert all(isinstance(r, BadRequestError) for r in results)
        assert sum(str(r) == "Invalid OTP" for r in results) == 5

        async with file_session_factory() as session:
            user = (await session.execute(select(User).where(User.email == email))).scalar_one()
            assert user.email_otp_attempts == 5
            assert user.is_email_verified is False

        with pytest.raises(BadRequestError, match="Too many attempts"):
            await auth_service.register_verify(email, OTP)


class TestAsciiValidation:
    """
    Test Case TC-067: Password Needs An ASCII Letter And Digit
    Description: Verify that non-ASCII digits or letters do not satisfy the strength rule
    Expected Result: Returns 422 for superscript digits, Arabic-Indic digits and Greek-only letters
    """
    @pytest.mark.asyncio
    async def test_tc067_password_requires_ascii(self, client: AsyncClient):
        """TC-067: ASCII password strength"""
        superscript = await client.post("/auth/register/start", json={**REGISTRATION, "password": "Password²"})
        assert superscript.status_code == 422

        arabic_digit = await client.post("/auth/register/start", json={**REGISTRATION, "password": "Password٣"})
        assert arabic_digit.status_code == 422

        greek_letters = await client.post("/auth/register/start", json={**REGISTRATION, "password": "αβγδεζη1"})
        assert greek_letters.status_code == 422

    """
    Test Case TC-068: OTP Must Be ASCII Digits
    Description: Verify that Arabic-Indic digits are not accepted as a code
    Expected Result: Returns 422
    """
    @pytest.mark.asyncio
    async def test_tc068_otp_requires_ascii_digits(self, client: AsyncClient):
        """TC-068: ASCII OTP digits"""
        response = await client.post("/auth/register/verify", json={"email": REGISTRATION["email"], "otp": "١٢٣٤"})
        assert response.status_code == 422
