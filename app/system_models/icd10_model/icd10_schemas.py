# app/system_models/icd10_model/icd10_schemas.py
from typing import List, Optional
from datetime import date, datetime

from app.shared.schemas import CamelModel


class Icd10CodeResponse(CamelModel):
    id: Optional[int] = None  # None for WHO results not yet cached
    code: str
    short_description: str
    long_description: Optional[str] = None
    chapter_code: Optional[str] = None
    chapter_name: Optional[str] = None
    category_code: Optional[str] = None
    category_name: Optional[str] = None
    billable: bool
    usage_count: int
    last_used_at: Optional[datetime] = None
    search_terms: List[str] = []
    effective_date: Optional[date] = None
    is_active: bool


class Icd10ValidationResponse(CamelModel):
    code: str
    valid: bool
    message: str


class Icd10SeedResponse(CamelModel):
    success: bool
    message: str
    seeded: int
    skipped: int
