# app/users/auth_routers.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.auth_services import (
    registering_user,
    login_user,
    create_password_reset_link,
    reset_password_with_token,
    request_reset_code,
    verify_reset_code,
    reset_password_with_code,
)
from app.users.user_models.schemas import (
    UserRegister,
    UserLogin,
    UserResponse,
    UserLoginResponse,
    UserForgotPassword,
    UserResetPassword,
    RequestResetCode,
    VerifyResetCode,
    ResetPasswordWithCode,
    VerifyResetCodeResponse,
)
from app.database.connection import get_db
from app.shared.schemas import MessageResponse

router = APIRouter()

# ============================================================
# ✅ REGISTER
# ============================================================
@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(user_data: UserRegister, db: AsyncSession = Depends(get_db)):
    """Create a new user account. Default role is "doctor"."""
    return await registering_user(user_data, db)


# ============================================================
# ✅ AUTHENTICATE USER (LOGIN)
# ============================================================
@router.post("/login", response_model=UserLoginResponse)
async def login(user_data: UserLogin, db: AsyncSession = Depends(get_db)) -> UserLoginResponse:
    access_token, user = await login_user(user_data, db)
    return UserLoginResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


# ============================================================
# ✅ FORGOT PASSWORD (legacy reset link)
# ============================================================
@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    data: UserForgotPassword,
    db: AsyncSession = Depends(get_db)
):
    message = await create_password_reset_link(data.email, db)
    return {"message": message}


# ============================================================
# ✅ RESET PASSWORD (legacy reset link)
# ============================================================
@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    data: UserResetPassword,
    db: AsyncSession = Depends(get_db)
):
    await reset_password_with_token(data.token, data.new_password, db)
    return {"message": "Password has been reset successfully"}


# ============================================================
# ✅ REQUEST 6-DIGIT RESET CODE
# ============================================================
@router.post("/request-reset-code", response_model=MessageResponse)
async def request_code(
    data: RequestResetCode,
    db: AsyncSession = Depends(get_db)
):
    """Send a 6-digit reset code. Expires in 10 minutes, 5 attempts max."""
    message = await request_reset_code(data.email, db)
    return {"message": message}


# ============================================================
# ✅ VERIFY 6-DIGIT RESET CODE
# ============================================================
@router.post("/verify-reset-code", response_model=VerifyResetCodeResponse)
async def verify_code(
    data: VerifyResetCode,
    db: AsyncSession = Depends(get_db)
):
    await verify_reset_code(data.email, data.code, db)
    return VerifyResetCodeResponse(valid=True, message="Code verified successfully")


# ============================================================
# ✅ RESET PASSWORD WITH 6-DIGIT CODE
# ============================================================
@router.post("/reset-password-with-code", response_model=MessageResponse)
async def reset_with_code(
    data: ResetPasswordWithCode,
    db: AsyncSession = Depends(get_db)
):
    await reset_password_with_code(data.email, data.code, data.new_password, db)
    return {"message": "Password reset successfully"}
