"""
Lead Model — Email addresses captured by the landing page.
"""
from sqlalchemy import Column, String, DateTime, Text

from invoicebolt.database import Base


class Lead(Base):
    __tablename__ = "leads"

    id = Column(String(36), primary_key=True)
    email = Column(String(320), unique=True, nullable=False, index=True)
    utms = Column(Text)  # serialized attribution blob, stored as sent
    created_at = Column(DateTime(timezone=True), nullable=False)
