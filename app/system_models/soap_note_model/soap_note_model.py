# app/system_models/soap_note_model/soap_note_model.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, CheckConstraint, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow

SOAP_NOTE_STATUSES = ("pending", "submitted", "reviewed", "archived")

class SoapNote(Base):
    __tablename__ = "soap_notes"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Four clinical sections
    symptoms = Column(Text, nullable=False)
    physical_examination = Column(Text, nullable=False)
    diagnosis = Column(Text, nullable=False)
    management = Column(Text, nullable=False)
    icd10_code = Column(String(10), nullable=True)

    status = Column(String, default="pending", nullable=False)
    was_edited = Column(Boolean, default=False, nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    # Append-only list of {editedBy, editedByName, editedAt, changes: [{field, oldValue, newValue}]}
    edit_history = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
    last_edited_by = Column(Integer, nullable=True)
    last_edited_by_name = Column(String, nullable=True)
    last_edited_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'submitted', 'reviewed', 'archived')",
            name="check_soap_note_status_values",
        ),
    )

    patient = relationship("Patient", back_populates="soap_notes")
    created_by = relationship("User", back_populates="soap_notes")

    def __repr__(self):
        return f"<SoapNote {self.id}: patient={self.patient_id} status={self.status}>"
