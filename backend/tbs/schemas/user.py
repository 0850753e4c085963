"""User, staff and authentication schemas"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum

from tbs.core.security import normalize_email

EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'


class UserRole(str, Enum):
    """User role enumeration"""
    ADMIN = "admin"
    FOREMAN = "foreman"
    WORKER = "worker"
    CONTRACTOR = "contractor"
    LABOURER = "labourer"


class UserStatus(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"


class LoginRequest(BaseModel):
    """Login payload"""
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=4, max_length=256)

    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return normalize_email(v)


class SessionUserResponse(BaseModel):
    """Public part of a user record returned with tokens and from /me"""
    id: int
    name: str
    email: str
    role: str

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    access_token: str = Field(..., alias="accessToken")
    user: SessionUserResponse

    class Config:
        populate_by_name = True


class AccessTokenResponse(BaseModel):
    access_token: str = Field(..., alias="accessToken")

    class Config:
        populate_by_name = True


class UserResponse(BaseModel):
    """User directory entry"""
    id: int
    name: str
    email: str
    role: str
    position: Optional[str] = None
    phone: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StaffCreate(BaseModel):
    """Staff onboarding schema"""
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=40)
    role: UserRole
    position: str = Field(..., min_length=1, max_length=120)
    # bcrypt only considers the first 72 bytes
    password: str = Field(..., min_length=8, max_length=72)

    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return normalize_email(v)

    @field_validator('name', 'position')
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('must not be blank')
        return v


class StaffUpdate(BaseModel):
    """Partial staff update; omitted fields keep their value"""
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[str] = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=40)
    role: Optional[UserRole] = None
    position: Optional[str] = Field(None, min_length=1, max_length=120)
    status: Optional[UserStatus] = None

    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return normalize_email(v) if v is not None else v
