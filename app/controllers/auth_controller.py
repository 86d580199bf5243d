from fastapi import APIRouter, HTTPException, Depends
from app.schemas.auth import (
    RegisterStartRequest,
    RegisterVerifyRequest,
    ResendOtpRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    RegisterStartResponse,
    RegisterVerifyResponse,
    ResendOtpResponse,
    AuthTokenResponse,
    ForgotPasswordResponse,
    ResetPasswordResponse,
    MeResponse,
)
from app.services import auth_service
from app.utils.dependencies import get_current_user
from app.utils.errors import http_status_for

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register/start", response_model=RegisterStartResponse)
async def register_start(request: RegisterStartRequest):
    """Start registration: store the account unverified and email an OTP"""
    try:
        result = await auth_service.register_start(
            email=request.email,
            password=request.password,
            name=request.name,
            phone=request.phone,
        )
        return RegisterStartResponse(**result)
    except ValueError as e:
        raise HTTPException(status_code=http_status_for(e), detail=str(e))


@router.post("/register/verify", response_model=RegisterVerifyResponse)
async def register_verify(request: RegisterVerifyRequest):
    """Confirm the emailed OTP and get an access token"""
    try:
        result = await auth_service.register_verify(email=request.email, otp=request.otp)
        return RegisterVerifyResponse(**result)
    except ValueError as e:
        raise HTTPException(status_code=http_status_for(e), detail=str(e))


@router.post("/register/resend", response_model=ResendOtpResponse)
async def register_resend(request: ResendOtpRequest):
    try:
        result = await auth_service.resend_otp(email=request.email)
        return ResendOtpResponse(**result)
    except ValueError as e:
        raise HTTPException(status_code=http_status_for(e), detail=str(e))


@router.post("/login", response_model=AuthTokenResponse)
async def login(request: LoginRequest):
    """Login with email and password"""
    try:
        result = await auth_service.login(email=request.email, password=request.password)
        return AuthTokenResponse(**result)
    except ValueError as e:
        raise HTTPException(
            status_code=http_status_for(e),
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post("/password/forgot", response_model=ForgotPasswordResponse)
async def forgot_password(request: ForgotPasswordRequest):
    """Email a password reset link"""
    try:
        result = await auth_service.forgot_password(email=request.email)
        return ForgotPasswordResponse(**result)
    except ValueError as e:
        raise HTTPException(status_code=http_status_for(e), detail=str(e))


@router.post("/password/reset", response_model=ResetPasswordResponse)
async def reset_password(request: ResetPasswordRequest):
    try:
        result = await auth_service.reset_password(
            email=request.email,
            token=request.token,
            new_password=request.password,
        )
        return ResetPasswordResponse(**result)
    except ValueError as e:
        raise HTTPException(status_code=http_status_for(e), detail=str(e))


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: dict = Depends(get_current_user)):
    """Get current logged-in user"""
    try:
        result = await auth_service.get_me(current_user["user_id"])
        return MeResponse(**result)
    except ValueError as e:
        raise HTTPException(
            status_code=http_status_for(e),
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
