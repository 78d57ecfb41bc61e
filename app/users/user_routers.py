# app/users/user_routers.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import get_current_user
from app.users.auth_services import deactivate_account
from app.users.user_models.user_model import User
from app.users.user_models.schemas import (
    UserResponse,
    DeactivateAccount,
    DeactivateAccountResponse,
)

router = APIRouter()


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


# ============================================================
# ✅ DEACTIVATE OWN ACCOUNT
# ============================================================
@router.post("/deactivate", response_model=DeactivateAccountResponse)
async def deactivate(
    data: DeactivateAccount,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Deactivate the current account after confirming the password.
    Login and every authenticated endpoint reject the account afterwards.
    """
    user = await deactivate_account(current_user, data, db)
    return DeactivateAccountResponse(
        message="Account deactivated successfully",
        deactivated_at=user.deactivated_at,
    )
