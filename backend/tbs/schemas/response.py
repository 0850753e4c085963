"""Generic API response schemas"""

from pydantic import BaseModel
from typing import Optional, Any


class ErrorResponse(BaseModel):
    """Body of every error response"""
    error: str
    details: Optional[Any] = None


class OkResponse(BaseModel):
    ok: bool = True


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    timestamp: str
    database: dict
