"""Contractor schemas

Request bodies use the camelCase keys the portal sends (``contactName``,
``insuranceExpiry``); snake_case is accepted too.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from tbs.schemas.user import EMAIL_PATTERN


class ContractorStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ContractorCreate(BaseModel):
    company: str = Field(..., min_length=1, max_length=120)
    trade: str = Field(..., min_length=1, max_length=80)
    contact_name: str = Field(..., min_length=1, max_length=120, alias="contactName")
    phone: str = Field(..., min_length=1, max_length=40)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    rating: Optional[float] = Field(None, ge=0, le=5)
    insurance_expiry: Optional[date] = Field(None, alias="insuranceExpiry")
    notes: Optional[str] = None
    status: ContractorStatus = ContractorStatus.ACTIVE

    class Config:
        populate_by_name = True

    @field_validator('company', 'trade', 'contact_name')
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('must not be blank')
        return v


class ContractorUpdate(BaseModel):
    company: Optional[str] = Field(None, min_length=1, max_length=120)
    trade: Optional[str] = Field(None, min_length=1, max_length=80)
    contact_name: Optional[str] = Field(None, min_length=1, max_length=120, alias="contactName")
    phone: Optional[str] = Field(None, min_length=1, max_length=40)
    email: Optional[str] = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    rating: Optional[float] = Field(None, ge=0, le=5)
    insurance_expiry: Optional[date] = Field(None, alias="insuranceExpiry")
    notes: Optional[str] = None
    status: Optional[ContractorStatus] = None

    class Config:
        populate_by_name = True


class ContractorResponse(BaseModel):
    id: int
    company: str
    trade: str
    contact_name: str
    phone: str
    email: str
    rating: Optional[float] = None
    insurance_expiry: Optional[date] = None
    notes: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
