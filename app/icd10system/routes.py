# app/icd10system/routes.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.icd10system.code_format import validate_code_format
from app.icd10system.icd10_service import icd10_service
from app.system_models.icd10_model.icd10_schemas import (
    Icd10CodeResponse,
    Icd10ValidationResponse,
    Icd10SeedResponse,
)
from app.users.auth_dependencies import get_current_admin, get_current_user
from app.users.user_models.user_model import User
from config.config_schemas import Icd10ConfigRequest, Icd10ConfigResponse
from config.icd10config import icd10_settings

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/search", response_model=List[Icd10CodeResponse])
async def search_codes(
    q: Optional[str] = Query(None, description="Disease name, code or keyword"),
    limit: Optional[int] = Query(None, ge=1, description="Capped at MAX_SEARCH_LIMIT"),
    db: AsyncSession = Depends(get_db),
):
    """Short or empty queries return the most used codes instead of an error."""
    return await icd10_service.search_codes(db, q, limit)


@router.get("/popular", response_model=List[Icd10CodeResponse])
async def get_popular(
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    return await icd10_service.get_most_used_codes(db, limit)


@router.get("/chapter/{chapter_code}", response_model=List[Icd10CodeResponse])
async def get_by_chapter(
    chapter_code: str,
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    return await icd10_service.get_codes_by_chapter(db, chapter_code, limit)


@router.get("/code/{code}", response_model=Icd10CodeResponse)
async def get_code(code: str, db: AsyncSession = Depends(get_db)):
    """Full details of one code. Fetched from the WHO API when not cached locally."""
    normalized = code.strip().upper()
    if not validate_code_format(normalized):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid ICD-10 code format. Expected format: A00 or A00.0"
        )

    details = await icd10_service.get_code_details(db, normalized)
    if not details:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"ICD-10 code '{normalized}' not found"
        )
    return details


@router.get("/validate/{code}", response_model=Icd10ValidationResponse)
async def validate_code(code: str):
    is_valid = validate_code_format(code)
    return {
        "code": code,
        "valid": is_valid,
        "message": "Valid ICD-10 code format" if is_valid else "Invalid ICD-10 code format",
    }


@router.post("/seed", response_model=Icd10SeedResponse)
async def seed_codes(db: AsyncSession = Depends(get_db)):
    """Populate common codes. Safe to run repeatedly."""
    seeded, skipped = await icd10_service.seed_common_codes(db)
    return {
        "success": True,
        "message": f"Database seeded with common ICD-10 codes ({seeded} new, {skipped} already present)",
        "seeded": seeded,
        "skipped": skipped,
    }


# ============================================================================
# RUNTIME CONFIGURATION
# ============================================================================
def _current_config() -> Icd10ConfigResponse:
    return Icd10ConfigResponse(
        min_query_length=icd10_settings.MIN_QUERY_LENGTH,
        default_search_limit=icd10_settings.DEFAULT_SEARCH_LIMIT,
        max_search_limit=icd10_settings.MAX_SEARCH_LIMIT,
        min_local_results=icd10_settings.MIN_LOCAL_RESULTS,
        enable_fuzzy_search=icd10_settings.ENABLE_FUZZY_SEARCH,
        fuzzy_similarity_threshold=icd10_settings.FUZZY_SIMILARITY_THRESHOLD,
        fuzzy_search_available=icd10_service.pg_trgm_available,
        enable_external_search=icd10_settings.ENABLE_EXTERNAL_SEARCH,
        who_api_base=icd10_settings.WHO_API_BASE,
        who_credentials_configured=icd10_settings.has_credentials,
    )


@router.get("/config", response_model=Icd10ConfigResponse)
async def get_config():
    return _current_config()


@router.post("/config", response_model=Icd10ConfigResponse)
async def update_config(
    request: Icd10ConfigRequest,
    admin: User = Depends(get_current_admin),
):
    """Partially update resolver settings in memory. Resets on restart."""
    updates = request.model_dump(exclude_none=True)
    for field, value in updates.items():
        setattr(icd10_settings, field.upper(), value)

    if updates:
        logger.info(f"⚙️ ICD-10 config updated by {admin.email}: {updates}")
    return _current_config()
