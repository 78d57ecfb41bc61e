# app/system_models/patient_model/patient_model.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow

class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)

    # Hospital-assigned identifier, e.g. "P-2025-011"
    patient_id = Column(String(50), unique=True, index=True, nullable=False)

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String, nullable=False)
    phone_number = Column(String, nullable=True)
    email = Column(String, nullable=True)

    registered_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_visit = Column(DateTime(timezone=True), nullable=True)

    soap_notes = relationship("SoapNote", back_populates="patient")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<Patient {self.patient_id}: {self.first_name} {self.last_name}>"
