# app/system_services/patient_services.py
import logging
from datetime import timedelta
from typing import Any, Dict, List, Sequence, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.time import utcnow
from app.shared.pagination import paginate
from app.system_models.patient_model.patient_model import Patient


logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 20
RECENT_PATIENT_DAYS = 14


# Demo patients for development databases
DEMO_PATIENTS: List[Dict[str, Any]] = [
    {"patient_id": "P-2025-011", "first_name": "Wanjiru", "last_name": "Kamau", "age": 34, "gender": "female", "phone_number": "+254712345678", "email": "wanjiru.kamau@gmail.com"},
    {"patient_id": "P-2025-012", "first_name": "Ochieng", "last_name": "Otieno", "age": 45, "gender": "male", "phone_number": "+254723456789", "email": "ochieng.otieno@yahoo.com"},
    {"patient_id": "P-2025-013", "first_name": "Njeri", "last_name": "Mwangi", "age": 28, "gender": "female", "phone_number": "+254734567890", "email": "njeri.mwangi@outlook.com"},
    {"patient_id": "P-2025-014", "first_name": "Kipchoge", "last_name": "Koech", "age": 52, "gender": "male", "phone_number": "+254745678901", "email": "kipchoge.koech@gmail.com"},
    {"patient_id": "P-2025-015", "first_name": "Akinyi", "last_name": "Odhiambo", "age": 39, "gender": "female", "phone_number": "+254756789012", "email": "akinyi.odhiambo@yahoo.com"},
    {"patient_id": "P-2025-016", "first_name": "Kamau", "last_name": "Ngugi", "age": 61, "gender": "male", "phone_number": "+254767890123", "email": "kamau.ngugi@gmail.com"},
    {"patient_id": "P-2025-017", "first_name": "Chebet", "last_name": "Kiplagat", "age": 31, "gender": "female", "phone_number": "+254778901234", "email": "chebet.kiplagat@outlook.com"},
    {"patient_id": "P-2025-018", "first_name": "Mwangi", "last_name": "Kariuki", "age": 47, "gender": "male", "phone_number": "+254789012345", "email": "mwangi.kariuki@gmail.com"},
    {"patient_id": "P-2025-019", "first_name": "Nyambura", "last_name": "Wachira", "age": 26, "gender": "female", "phone_number": "+254790123456", "email": "nyambura.wachira@yahoo.com"},
    {"patient_id": "P-2025-020", "first_name": "Onyango", "last_name": "Okoth", "age": 55, "gender": "male", "phone_number": "+254701234567", "email": "onyango.okoth@gmail.com"},
    {"patient_id": "P-2025-021", "first_name": "Wambui", "last_name": "Ndung'u", "age": 42, "gender": "female", "phone_number": "+254712345670", "email": "wambui.ndungu@outlook.com"},
    {"patient_id": "P-2025-022", "first_name": "Kiprop", "last_name": "Biwott", "age": 38, "gender": "male", "phone_number": "+254723456780", "email": "kiprop.biwott@gmail.com"},
    {"patient_id": "P-2025-023", "first_name": "Auma", "last_name": "Adhiambo", "age": 50, "gender": "female", "phone_number": "+254734567801", "email": "auma.adhiambo@yahoo.com"},
    {"patient_id": "P-2025-024", "first_name": "Kimani", "last_name": "Njoroge", "age": 29, "gender": "male", "phone_number": "+254745678012", "email": "kimani.njoroge@gmail.com"},
    {"patient_id": "P-2025-025", "first_name": "Mumbi", "last_name": "Githinji", "age": 36, "gender": "female", "phone_number": "+254756789023", "email": "mumbi.githinji@outlook.com"},
    {"patient_id": "P-2025-026", "first_name": "Rotich", "last_name": "Kibet", "age": 44, "gender": "male", "phone_number": "+254767890134", "email": "rotich.kibet@gmail.com"},
    {"patient_id": "P-2025-027", "first_name": "Kerubo", "last_name": "Nyaboke", "age": 33, "gender": "female", "phone_number": "+254778901245", "email": "kerubo.nyaboke@yahoo.com"},
    {"patient_id": "P-2025-028", "first_name": "Mutua", "last_name": "Musyoka", "age": 58, "gender": "male", "phone_number": "+254789012356", "email": "mutua.musyoka@gmail.com"},
    {"patient_id": "P-2025-029", "first_name": "Wairimu", "last_name": "Maina", "age": 25, "gender": "female", "phone_number": "+254790123467", "email": "wairimu.maina@outlook.com"},
    {"patient_id": "P-2025-030", "first_name": "Omondi", "last_name": "Owino", "age": 48, "gender": "male", "phone_number": "+254701234578", "email": "omondi.owino@gmail.com"},
]


# ============================================================
# ✅ SEARCH PATIENTS BY NAME OR HOSPITAL ID
# ============================================================
async def search_patients(db: AsyncSession, query: str) -> Sequence[Patient]:
    if not query or len(query.strip()) < 2:
        return []

    term = query.strip()
    stmt = (
        select(Patient)
        .where(
            or_(
                Patient.first_name.icontains(term, autoescape=True),
                Patient.last_name.icontains(term, autoescape=True),
                Patient.patient_id.icontains(term, autoescape=True),
                (Patient.first_name + " " + Patient.last_name).icontains(term, autoescape=True),
            )
        )
        .order_by(Patient.last_name.asc(), Patient.first_name.asc())
        .limit(SEARCH_RESULT_LIMIT)
    )
    result = await db.execute(stmt)
    return result.scalars().all()


# ============================================================
# ✅ RECENTLY REGISTERED PATIENTS
# ============================================================
async def get_recent_patients(db: AsyncSession, limit: int = 10) -> Sequence[Patient]:
    since = utcnow() - timedelta(days=RECENT_PATIENT_DAYS)
    stmt = (
        select(Patient)
        .where(Patient.registered_at >= since)
        .order_by(Patient.registered_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return result.scalars().all()


async def get_all_patients(
    db: AsyncSession, page: int = 1, limit: int = 20
) -> Tuple[Sequence[Patient], Dict[str, Any]]:
    stmt = select(Patient).order_by(Patient.last_name.asc(), Patient.first_name.asc())
    return await paginate(db, stmt, page, limit)


async def get_patient_by_id(db: AsyncSession, id: int) -> Patient:
    patient = await db.get(Patient, id)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient with ID {id} not found"
        )
    return patient


async def get_patient_by_patient_id(db: AsyncSession, patient_id: str) -> Patient:
    result = await db.execute(select(Patient).where(Patient.patient_id == patient_id))
    patient = result.scalars().first()
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient with Patient ID {patient_id} not found"
        )
    return patient


async def patient_exists(db: AsyncSession, id: int) -> bool:
    count = await db.scalar(select(func.count()).select_from(Patient).where(Patient.id == id))
    return bool(count)


# ============================================================
# ✅ SEED DEMO PATIENTS (development only)
# ============================================================
async def seed_demo_patients(db: AsyncSession) -> List[Patient]:
    existing = await db.scalar(select(func.count()).select_from(Patient))
    if existing:
        logger.info("ℹ️ Patients already exist in database. Skipping seed.")
        return []

    patients = [Patient(**data) for data in DEMO_PATIENTS]
    db.add_all(patients)
    await db.commit()
    logger.info(f"✅ Seeded {len(patients)} demo patients")
    return patients
