# config/reset_config_route.py
from fastapi import APIRouter, Depends
from app.users.auth_dependencies import get_current_admin
from app.users.user_models.user_model import User

router = APIRouter(prefix="/admin", tags=["admin"])

@router.post("/reset-all-configs")
async def reset_all_configs(
    admin: User = Depends(get_current_admin)
):
    """
    Reset all runtime configs to file defaults.
    Admin-only operation.
    """
    from config.icd10config import icd10_settings
    from config.transcriptionconfig import transcription_settings

    # Reload settings from env/.env
    icd10_settings.__init__()
    transcription_settings.__init__()

    return {
        "message": "All configs reset to defaults",
        "reset_by": admin.email
    }
