"""Contractor routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from tbs.core.database import get_db
from tbs.core.security import Identity
from tbs.schemas.contractor import ContractorCreate, ContractorResponse, ContractorUpdate
from tbs.schemas.response import MessageResponse
from tbs.services.contractor_service import ContractorService
from tbs.api.deps import get_contractor_service, get_current_identity, require_roles

router = APIRouter()


@router.get("", response_model=List[ContractorResponse])
def list_contractors(
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    contractor_service: ContractorService = Depends(get_contractor_service),
):
    return contractor_service.list_contractors(db)


@router.get("/{contractor_id}", response_model=ContractorResponse)
def get_contractor(
    contractor_id: int,
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    contractor_service: ContractorService = Depends(get_contractor_service),
):
    return contractor_service.get_contractor(db, contractor_id)


@router.post("", response_model=ContractorResponse, status_code=status.HTTP_201_CREATED)
def create_contractor(
    data: ContractorCreate,
    _: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    contractor_service: ContractorService = Depends(get_contractor_service),
):
    """Register a contractor (admin only)"""
    return contractor_service.create_contractor(db, data)


@router.put("/{contractor_id}", response_model=ContractorResponse)
def update_contractor(
    contractor_id: int,
    data: ContractorUpdate,
    _: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    contractor_service: ContractorService = Depends(get_contractor_service),
):
    return contractor_service.update_contractor(db, contractor_id, data)


@router.delete("/{contractor_id}", response_model=MessageResponse)
def delete_contractor(
    contractor_id: int,
    _: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    contractor_service: ContractorService = Depends(get_contractor_service),
):
    contractor_service.delete_contractor(db, contractor_id)
    return MessageResponse(message="Contractor deleted successfully")
