# app/system_services/patient_routes.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.auth_dependencies import get_current_user
from app.system_models.patient_model.patient_schemas import (
    PatientResponse,
    PatientListResponse,
    PatientSeedResponse,
)
from app.system_services import patient_services

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/search", response_model=List[PatientResponse])
async def search_patients(
    q: str = Query("", description="Name or hospital patient ID (minimum 2 characters)"),
    db: AsyncSession = Depends(get_db),
):
    """Search by first name, last name, full name or hospital ID. Up to 20 results."""
    return await patient_services.search_patients(db, q)


@router.get("/recent", response_model=List[PatientResponse])
async def get_recent_patients(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Patients registered in the last 14 days, newest first."""
    return await patient_services.get_recent_patients(db, limit)


@router.get("", response_model=PatientListResponse)
async def get_all_patients(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    patients, meta = await patient_services.get_all_patients(db, page, limit)
    return {"data": patients, "meta": meta}


@router.get("/patient-id/{patient_id}", response_model=PatientResponse)
async def get_patient_by_patient_id(patient_id: str, db: AsyncSession = Depends(get_db)):
    return await patient_services.get_patient_by_patient_id(db, patient_id)


@router.get("/{id}", response_model=PatientResponse)
async def get_patient(id: int, db: AsyncSession = Depends(get_db)):
    return await patient_services.get_patient_by_id(db, id)


# DEVELOPMENT ONLY
@router.post("/dev/seed", response_model=PatientSeedResponse)
async def seed_patients(db: AsyncSession = Depends(get_db)):
    """Insert the demo patient set. Only runs when the table is empty."""
    patients = await patient_services.seed_demo_patients(db)
    return {
        "message": f"Seeded {len(patients)} dummy patients" if patients
        else "Patients already exist. No seed performed.",
        "count": len(patients),
    }
