from sqlalchemy import Column, String, Text, DateTime, Integer, Index

from models.base_model import Base, utcnow


class ContactForm(Base):
    __tablename__ = "contact_forms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    submitted_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_contact_forms_submitted_at", "submitted_at"),
    )
