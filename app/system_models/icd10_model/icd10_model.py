# app/system_models/icd10_model/icd10_model.py
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, Index, JSON
from sqlalchemy.dialects import postgresql
from app.database.connection import Base
from app.helpers.time import utcnow

class Icd10Code(Base):
    __tablename__ = "icd10_codes"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(10), unique=True, index=True, nullable=False)

    short_description = Column(String(200), nullable=False)
    long_description = Column(Text, nullable=True)

    chapter_code = Column(String(5), nullable=True, index=True)
    chapter_name = Column(String(200), nullable=True)
    category_code = Column(String(10), nullable=True)
    category_name = Column(String(200), nullable=True)

    billable = Column(Boolean, default=True, nullable=False)
    usage_count = Column(Integer, default=0, nullable=False)
    last_used_at = Column(DateTime(timezone=True), nullable=True)

    # text[] on PostgreSQL, JSON list elsewhere
    search_terms = Column(
        JSON().with_variant(postgresql.ARRAY(String), "postgresql"),
        default=list,
        nullable=False,
    )
    effective_date = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_icd10_codes_usage", "usage_count", "last_used_at"),
    )

    def __repr__(self):
        return f"<Icd10Code {self.code}: {self.short_description}>"
