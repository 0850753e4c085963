"""Site photo routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from tbs.core.database import get_db
from tbs.core.security import Identity
from tbs.schemas.photo import PhotoCreate, PhotoResponse, PhotoTag, PhotoUpdate
from tbs.schemas.response import MessageResponse
from tbs.services.photo_service import PhotoService
from tbs.api.deps import get_current_identity, get_photo_service, require_roles

router = APIRouter()


@router.get("", response_model=List[PhotoResponse])
def list_photos(
    project_id: Optional[int] = Query(None),
    tag: Optional[PhotoTag] = Query(None),
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    photo_service: PhotoService = Depends(get_photo_service),
):
    return photo_service.list_photos(db, project_id=project_id, tag=tag.value if tag else None)


@router.get("/{photo_id}", response_model=PhotoResponse)
def get_photo(
    photo_id: int,
    _: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    photo_service: PhotoService = Depends(get_photo_service),
):
    return photo_service.get_photo(db, photo_id)


@router.post("", response_model=PhotoResponse, status_code=status.HTTP_201_CREATED)
def create_photo(
    data: PhotoCreate,
    identity: Identity = Depends(require_roles("admin", "foreman")),
    db: Session = Depends(get_db),
    photo_service: PhotoService = Depends(get_photo_service),
):
    """Record a site photo; the caller is stored as the uploader"""
    return photo_service.create_photo(db, data, uploaded_by=identity.id)


@router.put("/{photo_id}", response_model=PhotoResponse)
def update_photo(
    photo_id: int,
    data: PhotoUpdate,
    _: Identity = Depends(require_roles("admin", "foreman")),
    db: Session = Depends(get_db),
    photo_service: PhotoService = Depends(get_photo_service),
):
    return photo_service.update_photo(db, photo_id, data)


@router.delete("/{photo_id}", response_model=MessageResponse)
def delete_photo(
    photo_id: int,
    _: Identity = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
    photo_service: PhotoService = Depends(get_photo_service),
):
    photo_service.delete_photo(db, photo_id)
    return MessageResponse(message="Photo deleted successfully")
