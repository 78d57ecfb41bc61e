import logging
import secrets
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.user_models.schemas import (
    UserRegister,
    UserLogin,
    DeactivateAccount,
)
from app.users.user_models.user_model import User
from app.users.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    generate_password_reset_token,
    hash_reset_token,
    generate_reset_code,
    get_expiry,
)
from app.users.auth_emails import (
    send_reset_code_email,
    send_reset_password_link_with_token_in_email,
    send_welcome_email,
)
from config.appconfig import settings
from app.helpers.time import utcnow, as_utc


logger = logging.getLogger(__name__)

RESET_LINK_SENT = "If the email exists, a reset link has been sent"
RESET_CODE_SENT = "If the email exists, a reset code has been sent"
INVALID_RESET_CODE = "Invalid or expired reset code"


async def get_user_by_email(email: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalars().first()


# ============================================================
# ✅ REGISTER A NEW USER
# ============================================================
async def registering_user(user_data: UserRegister, db: AsyncSession) -> User:
    if await get_user_by_email(user_data.email, db):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists"
        )

    new_user = User(
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        role=user_data.role,
        is_active=True,
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)
    logger.info(f"✅ Registered user {new_user.id} ({new_user.role})")

    send_welcome_email(new_user.email, new_user.first_name)
    return new_user


# ============================================================
# ✅ AUTHENTICATE USER
# ============================================================
async def authenticate_user(
    email: str, password: str, db: AsyncSession
) -> Optional[User]:
    user = await get_user_by_email(email, db)

    if not user:
        return None

    if not verify_password(password, user.hashed_password):
        return None

    return user


# ============================================================
# ✅ LOGIN USER
# ============================================================
async def login_user(user_data: UserLogin, db: AsyncSession) -> tuple[str, User]:
    user = await authenticate_user(user_data.email, user_data.password, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account has been deactivated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "first_name": user.first_name,
            "last_name": user.last_name,
        }
    )
    return access_token, user


# ============================================================
# ✅ CREATE PASSWORD RESET LINK WITH THE RESET TOKEN ON IT
# ============================================================
async def create_password_reset_link(email: str, db: AsyncSession) -> str:
    user = await get_user_by_email(email, db)

    if not user or not user.is_active:
        # Don't reveal user existence
        return RESET_LINK_SENT

    reset_token = generate_password_reset_token()
    user.reset_password_token = hash_reset_token(reset_token)
    user.reset_password_expires = get_expiry(settings.RESET_TOKEN_EXPIRY_MINUTES)
    await db.commit()

    reset_link = f"{settings.FRONTEND_URL}/reset-password?token={reset_token}"
    send_reset_password_link_with_token_in_email(user.email, reset_link, user.first_name)

    return RESET_LINK_SENT


# ============================================================
# ✅ RESET PASSWORD WITH TOKEN
# ============================================================
async def reset_password_with_token(token: str, new_password: str, db: AsyncSession) -> None:
    result = await db.execute(
        select(User).where(User.reset_password_token == hash_reset_token(token))
    )
    user = result.scalars().first()

    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    if not user.reset_password_expires or as_utc(user.reset_password_expires) < utcnow():
        user.reset_password_token = None
        user.reset_password_expires = None
        await db.commit()
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    user.hashed_password = get_password_hash(new_password)
    # Single use
    user.reset_password_token = None
    user.reset_password_expires = None
    await db.commit()
    logger.info(f"🔑 Password reset via link for user {user.id}")


# ============================================================
# ✅ REQUEST 6-DIGIT RESET CODE
# ============================================================
async def request_reset_code(email: str, db: AsyncSession) -> str:
    user = await get_user_by_email(email, db)

    if not user or not user.is_active:
        return RESET_CODE_SENT

    code = generate_reset_code()
    user.reset_code = code
    user.reset_code_expires_at = get_expiry(settings.RESET_CODE_EXPIRY_MINUTES)
    user.reset_code_attempts = 0  # Fresh code, fresh attempts
    await db.commit()

    send_reset_code_email(
        user.email, code, user.first_name, settings.RESET_CODE_EXPIRY_MINUTES
    )
    return RESET_CODE_SENT


def _clear_reset_code(user: User) -> None:
    user.reset_code = None
    user.reset_code_expires_at = None
    user.reset_code_attempts = 0


async def _check_reset_code(user: Optional[User], code: str, db: AsyncSession) -> User:
    """Validate a reset code, counting failures and invalidating the code past its limits."""
    if not user or not user.reset_code or not user.reset_code_expires_at:
        raise HTTPException(status_code=400, detail=INVALID_RESET_CODE)

    if as_utc(user.reset_code_expires_at) < utcnow():
        _clear_reset_code(user)
        await db.commit()
        raise HTTPException(
            status_code=400, detail="Reset code has expired. Please request a new one."
        )

    max_attempts = settings.RESET_CODE_MAX_ATTEMPTS
    if user.reset_code_attempts >= max_attempts:
        _clear_reset_code(user)
        await db.commit()
        raise HTTPException(
            status_code=400, detail="Too many failed attempts. Please request a new code."
        )

    if not secrets.compare_digest(user.reset_code, code):
        user.reset_code_attempts += 1
        remaining = max_attempts - user.reset_code_attempts
        if remaining <= 0:
            _clear_reset_code(user)
            await db.commit()
            logger.warning(f"⚠️ Reset code invalidated for user {user.id} after {max_attempts} failed attempts")
            raise HTTPException(
                status_code=400, detail="Too many failed attempts. Please request a new code."
            )
        await db.commit()
        raise HTTPException(
            status_code=400,
            detail=f"Invalid reset code. {remaining} attempt(s) remaining.",
        )

    return user


# ============================================================
# ✅ VERIFY 6-DIGIT RESET CODE
# ============================================================
async def verify_reset_code(email: str, code: str, db: AsyncSession) -> None:
    user = await get_user_by_email(email, db)
    await _check_reset_code(user, code, db)


# ============================================================
# ✅ RESET PASSWORD WITH 6-DIGIT CODE
# ============================================================
async def reset_password_with_code(
    email: str, code: str, new_password: str, db: AsyncSession
) -> None:
    user = await _check_reset_code(await get_user_by_email(email, db), code, db)

    user.hashed_password = get_password_hash(new_password)
    _clear_reset_code(user)
    await db.commit()
    logger.info(f"🔑 Password reset via code for user {user.id}")


# ============================================================
# ✅ DEACTIVATE ACCOUNT
# ============================================================
async def deactivate_account(user: User, data: DeactivateAccount, db: AsyncSession) -> User:
    if not verify_password(data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password"
        )

    user.is_active = False
    user.deactivated_at = utcnow()
    user.deactivation_reason = data.reason
    await db.commit()
    await db.refresh(user)
    logger.info(f"🚫 Deactivated user {user.id}")
    return user
