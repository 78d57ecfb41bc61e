# app/system_models/patient_model/patient_schemas.py
from typing import Optional
from datetime import datetime

from app.shared.schemas import CamelModel, PaginatedResponse


class PatientResponse(CamelModel):
    id: int
    patient_id: str
    first_name: str
    last_name: str
    full_name: str
    age: int
    gender: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    registered_at: datetime
    last_visit: Optional[datetime] = None


class PatientSummary(CamelModel):
    """Compact patient view embedded in SOAP note responses."""
    id: int
    patient_id: str
    first_name: str
    last_name: str
    age: int
    gender: str


class PatientListResponse(PaginatedResponse[PatientResponse]):
    pass


class PatientSeedResponse(CamelModel):
    message: str
    count: int
