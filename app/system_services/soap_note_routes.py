# app/system_services/soap_note_routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import get_current_user
from app.users.user_models.user_model import User
from app.system_models.soap_note_model.soap_note_schemas import (
    SOAP_STATUS,
    SORT_FIELDS,
    SORT_ORDERS,
    SoapNoteCreate,
    SoapNoteUpdate,
    SoapNoteStatusUpdate,
    SoapNoteResponse,
    SoapNoteListResponse,
    SoapNoteHistoryResponse,
    SoapNoteStatistics,
)
from app.system_services import soap_note_services

router = APIRouter()


@router.post("", response_model=SoapNoteResponse, status_code=status.HTTP_201_CREATED)
async def create_soap_note(
    data: SoapNoteCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a SOAP note for an existing patient. The author is the current user."""
    return await soap_note_services.create_soap_note(db, data, current_user)


@router.get("", response_model=SoapNoteListResponse)
async def list_soap_notes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[SOAP_STATUS] = Query(None, alias="status"),
    patient_name: Optional[str] = Query(None, alias="patientName"),
    sort_by: SORT_FIELDS = Query("createdAt", alias="sortBy"),
    sort_order: SORT_ORDERS = Query("DESC", alias="sortOrder"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notes, meta = await soap_note_services.find_all(
        db,
        current_user,
        page=page,
        limit=limit,
        status_filter=status_filter,
        patient_name=patient_name,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {"data": notes, "meta": meta}


@router.get("/statistics", response_model=SoapNoteStatistics)
async def get_statistics(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await soap_note_services.get_statistics(db, current_user)


@router.get("/patient/{patient_id}", response_model=SoapNoteListResponse)
async def list_patient_soap_notes(
    patient_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notes, meta = await soap_note_services.find_by_patient(db, patient_id, page, limit)
    return {"data": notes, "meta": meta}


@router.get("/{id}", response_model=SoapNoteResponse)
async def get_soap_note(
    id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await soap_note_services.find_one(db, id, current_user)


@router.get("/{id}/history", response_model=SoapNoteHistoryResponse)
async def get_soap_note_history(
    id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await soap_note_services.get_edit_history(db, id, current_user)


@router.patch("/{id}", response_model=SoapNoteResponse)
async def update_soap_note(
    id: int,
    data: SoapNoteUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit content fields. Changed fields are appended to the note's edit history."""
    return await soap_note_services.update_soap_note(db, id, data, current_user)


@router.patch("/{id}/status", response_model=SoapNoteResponse)
async def update_soap_note_status(
    id: int,
    data: SoapNoteStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await soap_note_services.update_status(db, id, data.status, current_user)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_soap_note(
    id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await soap_note_services.remove_soap_note(db, id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
