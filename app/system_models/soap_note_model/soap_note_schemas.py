# app/system_models/soap_note_model/soap_note_schemas.py
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

from pydantic import Field, field_validator

from app.shared.schemas import CamelModel, PaginatedResponse
from app.system_models.patient_model.patient_schemas import PatientSummary

SOAP_STATUS = Literal["pending", "submitted", "reviewed", "archived"]
SORT_FIELDS = Literal["createdAt", "updatedAt"]
SORT_ORDERS = Literal["ASC", "DESC"]


def normalize_icd10_code(v):
    if isinstance(v, str):
        v = v.strip().upper()
        return v or None
    return v


class SoapNoteCreate(CamelModel):
    patient_id: int
    symptoms: str = Field(..., min_length=1)
    physical_examination: str = Field(..., min_length=1)
    diagnosis: str = Field(..., min_length=1)
    management: str = Field(..., min_length=1)
    icd10_code: Optional[str] = Field(None, max_length=10)

    @field_validator("icd10_code", mode="before")
    def normalize_code(cls, v):
        return normalize_icd10_code(v)


class SoapNoteUpdate(CamelModel):
    symptoms: Optional[str] = Field(None, min_length=1)
    physical_examination: Optional[str] = Field(None, min_length=1)
    diagnosis: Optional[str] = Field(None, min_length=1)
    management: Optional[str] = Field(None, min_length=1)
    icd10_code: Optional[str] = Field(None, max_length=10)

    @field_validator("icd10_code", mode="before")
    def normalize_code(cls, v):
        return normalize_icd10_code(v)


class SoapNoteStatusUpdate(CamelModel):
    status: SOAP_STATUS


class FieldChange(CamelModel):
    field: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None


class EditHistoryEntry(CamelModel):
    edited_by: int
    edited_by_name: str
    edited_at: datetime
    changes: List[FieldChange]


class NoteAuthor(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: str


class SoapNoteResponse(CamelModel):
    id: int
    patient_id: int
    patient: PatientSummary
    symptoms: str
    physical_examination: str
    diagnosis: str
    management: str
    icd10_code: Optional[str] = None
    status: SOAP_STATUS
    was_edited: bool
    submitted_at: Optional[datetime] = None
    created_by_id: int
    created_by: NoteAuthor
    edit_history: Optional[List[EditHistoryEntry]] = None
    last_edited_by: Optional[int] = None
    last_edited_by_name: Optional[str] = None
    last_edited_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class SoapNoteListResponse(PaginatedResponse[SoapNoteResponse]):
    pass


class SoapNoteHistoryResponse(CamelModel):
    note_id: int
    was_edited: bool
    last_edited_by: Optional[int] = None
    last_edited_by_name: Optional[str] = None
    last_edited_at: Optional[datetime] = None
    edit_history: List[EditHistoryEntry] = []


class SoapNoteStatistics(CamelModel):
    total: int
    by_status: Dict[str, int]
