# app/system_services/soap_note_services.py
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.helpers.time import utcnow
from app.icd10system.icd10_service import validate_code_format
from app.shared.pagination import paginate
from app.system_models.patient_model.patient_model import Patient
from app.system_models.soap_note_model.soap_note_model import SoapNote
from app.system_models.soap_note_model.soap_note_schemas import (
    SoapNoteCreate,
    SoapNoteUpdate,
)
from app.users.user_models.user_model import User


logger = logging.getLogger(__name__)

# Fields whose changes are recorded in the edit history, with their wire names
TRACKED_FIELDS = {
    "symptoms": "symptoms",
    "physical_examination": "physicalExamination",
    "diagnosis": "diagnosis",
    "management": "management",
    "icd10_code": "icd10Code",
}
REQUIRED_TEXT_FIELDS = ("symptoms", "physical_examination", "diagnosis", "management")

SORT_COLUMNS = {
    "createdAt": SoapNote.created_at,
    "updatedAt": SoapNote.updated_at,
}


def _with_relations(stmt):
    return stmt.options(selectinload(SoapNote.patient), selectinload(SoapNote.created_by))


def _check_icd10_code(code: Optional[str]) -> None:
    if code and not validate_code_format(code):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid ICD-10 code format: {code}"
        )


async def _load_note(db: AsyncSession, id: int) -> Optional[SoapNote]:
    stmt = _with_relations(select(SoapNote).where(SoapNote.id == id))
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalars().first()


# ============================================================
# ✅ CREATE SOAP NOTE
# ============================================================
async def create_soap_note(db: AsyncSession, data: SoapNoteCreate, user: User) -> SoapNote:
    patient = await db.get(Patient, data.patient_id)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Patient with ID {data.patient_id} not found"
        )
    _check_icd10_code(data.icd10_code)

    note = SoapNote(
        **data.model_dump(),
        created_by_id=user.id,
        status="pending",
        was_edited=False,
    )
    patient.last_visit = utcnow()

    db.add(note)
    await db.commit()
    logger.info(f"📝 SOAP note {note.id} created for patient {patient.patient_id} by user {user.id}")
    return await _load_note(db, note.id)


# ============================================================
# ✅ LIST CURRENT USER'S NOTES
# ============================================================
async def find_all(
    db: AsyncSession,
    user: User,
    page: int = 1,
    limit: int = 10,
    status_filter: Optional[str] = None,
    patient_name: Optional[str] = None,
    sort_by: str = "createdAt",
    sort_order: str = "DESC",
) -> Tuple[Sequence[SoapNote], Dict[str, Any]]:
    stmt = _with_relations(select(SoapNote).where(SoapNote.created_by_id == user.id))

    if status_filter:
        stmt = stmt.where(SoapNote.status == status_filter)

    if patient_name and patient_name.strip():
        term = patient_name.strip()
        stmt = stmt.join(SoapNote.patient).where(
            or_(
                Patient.first_name.icontains(term, autoescape=True),
                Patient.last_name.icontains(term, autoescape=True),
                (Patient.first_name + " " + Patient.last_name).icontains(term, autoescape=True),
            )
        )

    column = SORT_COLUMNS.get(sort_by, SoapNote.created_at)
    if sort_order == "ASC":
        stmt = stmt.order_by(column.asc(), SoapNote.id.asc())
    else:
        stmt = stmt.order_by(column.desc(), SoapNote.id.desc())

    return await paginate(db, stmt, page, limit)


async def find_by_patient(
    db: AsyncSession, patient_id: int, page: int = 1, limit: int = 10
) -> Tuple[Sequence[SoapNote], Dict[str, Any]]:
    if not await db.get(Patient, patient_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient with ID {patient_id} not found"
        )

    stmt = _with_relations(
        select(SoapNote)
        .where(SoapNote.patient_id == patient_id)
        .order_by(SoapNote.created_at.desc(), SoapNote.id.desc())
    )
    return await paginate(db, stmt, page, limit)


async def find_one(db: AsyncSession, id: int, user: User) -> SoapNote:
    """Load a note owned by `user`. Other users' notes are reported as missing."""
    note = await _load_note(db, id)
    if not note or note.created_by_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"SOAP note with ID {id} not found"
        )
    return note


# ============================================================
# ✅ UPDATE WITH EDIT HISTORY
# ============================================================
def collect_changes(note: SoapNote, updates: Dict[str, Any]) -> List[Dict[str, Any]]:
    """List {field, oldValue, newValue} for every tracked field whose value differs."""
    changes = []
    for field, wire_name in TRACKED_FIELDS.items():
        if field not in updates:
            continue
        new_value = updates[field]
        if new_value is None and field in REQUIRED_TEXT_FIELDS:
            continue
        old_value = getattr(note, field)
        if new_value != old_value:
            changes.append({"field": wire_name, "oldValue": old_value, "newValue": new_value})
    return changes


async def update_soap_note(
    db: AsyncSession, id: int, data: SoapNoteUpdate, editor: User
) -> SoapNote:
    note = await find_one(db, id, editor)
    updates = data.model_dump(exclude_unset=True)
    _check_icd10_code(updates.get("icd10_code"))

    changes = collect_changes(note, updates)
    if not changes:
        return note

    edited_at = utcnow()
    for change in changes:
        field = next(k for k, v in TRACKED_FIELDS.items() if v == change["field"])
        setattr(note, field, change["newValue"])

    # Reassign so the JSON column is flagged dirty
    note.edit_history = list(note.edit_history or []) + [
        {
            "editedBy": editor.id,
            "editedByName": editor.full_name,
            "editedAt": edited_at.isoformat(),
            "changes": changes,
        }
    ]
    note.was_edited = True
    note.last_edited_by = editor.id
    note.last_edited_by_name = editor.full_name
    note.last_edited_at = edited_at

    await db.commit()
    logger.info(f"✏️ SOAP note {note.id} edited by user {editor.id} ({len(changes)} field(s))")
    return await _load_note(db, note.id)


async def update_status(db: AsyncSession, id: int, new_status: str, user: User) -> SoapNote:
    note = await find_one(db, id, user)
    note.status = new_status

    if new_status == "submitted":
        note.submitted_at = utcnow()

    await db.commit()
    logger.info(f"🔄 SOAP note {note.id} status -> {new_status}")
    return await _load_note(db, note.id)


async def get_edit_history(db: AsyncSession, id: int, user: User) -> Dict[str, Any]:
    note = await find_one(db, id, user)
    return {
        "note_id": note.id,
        "was_edited": note.was_edited,
        "last_edited_by": note.last_edited_by,
        "last_edited_by_name": note.last_edited_by_name,
        "last_edited_at": note.last_edited_at,
        "edit_history": note.edit_history or [],
    }


async def remove_soap_note(db: AsyncSession, id: int, user: User) -> None:
    """Delete permanently. Only the author may delete; others see 404."""
    result = await db.execute(
        select(SoapNote).where(SoapNote.id == id, SoapNote.created_by_id == user.id)
    )
    note = result.scalars().first()
    if not note:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"SOAP note with ID {id} not found"
        )

    await db.delete(note)
    await db.commit()
    logger.info(f"🗑️ SOAP note {id} deleted by user {user.id}")


# ============================================================
# ✅ DASHBOARD STATISTICS
# ============================================================
async def get_statistics(db: AsyncSession, user: User) -> Dict[str, Any]:
    total = await db.scalar(
        select(func.count()).select_from(SoapNote).where(SoapNote.created_by_id == user.id)
    )
    rows = await db.execute(
        select(SoapNote.status, func.count())
        .where(SoapNote.created_by_id == user.id)
        .group_by(SoapNote.status)
    )
    return {
        "total": total or 0,
        "by_status": {row[0]: row[1] for row in rows.all()},
    }
