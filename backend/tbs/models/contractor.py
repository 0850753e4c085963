"""Contractor model"""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Float, CheckConstraint
from sqlalchemy.sql import func
from tbs.core.database import Base, in_list

CONTRACTOR_STATUSES = ("active", "inactive")


class Contractor(Base):
    """External trade company"""

    __tablename__ = "contractors"

    id = Column(Integer, primary_key=True, index=True)
    company = Column(String(120), nullable=False, index=True)
    trade = Column(String(80), nullable=False)
    contact_name = Column(String(120), nullable=False)
    phone = Column(String(40), nullable=False)
    email = Column(String(255), nullable=False)
    rating = Column(Float)
    insurance_expiry = Column(Date)
    notes = Column(Text)
    status = Column(String(20), default="active", server_default="active", nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        CheckConstraint(in_list("status", CONTRACTOR_STATUSES), name="chk_contractors_status"),
        CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 5)", name="chk_contractors_rating"),
    )
