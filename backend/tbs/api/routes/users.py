"""Current user and active-user directory routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from tbs.core.database import get_db
from tbs.core.exceptions import AuthenticationError
from tbs.core.security import Identity
from tbs.schemas.user import SessionUserResponse, UserResponse
from tbs.services.user_service import UserService
from tbs.api.deps import get_current_identity, get_user_service

router = APIRouter()


@router.get("/me", response_model=SessionUserResponse)
def get_me(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    """
    Get the caller's own record

    Returns:
        id, name, email and role as currently stored
    """
    user = user_service.get_user_by_id(db, identity.id)
    if not user or not user.is_active:
        raise AuthenticationError()
    return user


@router.get("/users", response_model=List[UserResponse])
def list_users(
    roles: Optional[str] = Query(None, description="Comma-separated role filter"),
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    """List active users, optionally restricted to some roles"""
    role_list = [r.strip() for r in roles.split(",") if r.strip()] if roles else None
    return user_service.list_active_users(db, role_list)


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    return user_service.get_active_user(db, user_id)
