"""Staff management routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from tbs.core.database import get_db
from tbs.core.security import Identity
from tbs.schemas.user import StaffCreate, StaffUpdate, UserResponse
from tbs.schemas.response import MessageResponse
from tbs.services.user_service import UserService
from tbs.api.deps import get_current_identity, get_user_service, require_roles

router = APIRouter()


@router.get("", response_model=List[UserResponse])
def list_staff(
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    """List every staff member, active or not, by name"""
    return user_service.list_staff(db)


@router.get("/{staff_id}", response_model=UserResponse)
def get_staff(
    staff_id: int,
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    return user_service.get_staff(db, staff_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_staff(
    data: StaffCreate,
    _: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    """
    Onboard a staff member (admin only)

    Args:
        data: Staff details including the initial password

    Returns:
        Created staff member without credentials
    """
    return user_service.create_staff(db, data)


@router.put("/{staff_id}", response_model=UserResponse)
def update_staff(
    staff_id: int,
    data: StaffUpdate,
    _: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    return user_service.update_staff(db, staff_id, data)


@router.delete("/{staff_id}", response_model=MessageResponse)
def delete_staff(
    staff_id: int,
    _: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    """Remove a staff member; admin accounts are refused"""
    user_service.delete_staff(db, staff_id)
    return MessageResponse(message="Staff member deleted successfully")
