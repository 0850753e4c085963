"""Contractor service"""

from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from tbs.models.contractor import Contractor
from tbs.schemas.contractor import ContractorCreate, ContractorUpdate
from tbs.core.exceptions import DuplicateContractorError, ResourceNotFoundError

_REQUIRED_FIELDS = {"company", "trade", "contact_name", "phone", "email", "status"}


class ContractorService:
    """Service for external trade contractors"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def list_contractors(db: Session) -> List[Contractor]:
        return db.query(Contractor).order_by(Contractor.company, Contractor.id).all()

    @staticmethod
    def get_contractor(db: Session, contractor_id: int) -> Contractor:
        contractor = db.query(Contractor).filter(Contractor.id == contractor_id).first()
        if not contractor:
            raise ResourceNotFoundError("Contractor")
        return contractor

    def create_contractor(self, db: Session, data: ContractorCreate) -> Contractor:
        """
        Register a contractor

        The same company and contact person (compared case-insensitively)
        may only be registered once.
        """
        duplicate = (
            db.query(Contractor.id)
            .filter(
                func.lower(Contractor.company) == data.company.lower(),
                func.lower(Contractor.contact_name) == data.contact_name.lower(),
            )
            .first()
        )
        if duplicate:
            raise DuplicateContractorError()

        values = data.model_dump()
        values["status"] = data.status.value
        contractor = Contractor(**values)
        db.add(contractor)
        db.commit()
        db.refresh(contractor)

        self.logger.info("Contractor created", extra={"contractor_id": contractor.id})
        return contractor

    def update_contractor(self, db: Session, contractor_id: int, data: ContractorUpdate) -> Contractor:
        contractor = self.get_contractor(db, contractor_id)
        changes = data.model_dump(exclude_unset=True)

        for field, value in changes.items():
            if value is None and field in _REQUIRED_FIELDS:
                continue
            setattr(contractor, field, value.value if field == "status" else value)

        db.commit()
        db.refresh(contractor)

        self.logger.info("Contractor updated", extra={"contractor_id": contractor.id, "fields": sorted(changes)})
        return contractor

    def delete_contractor(self, db: Session, contractor_id: int) -> None:
        contractor = self.get_contractor(db, contractor_id)
        db.delete(contractor)
        db.commit()

        self.logger.info("Contractor deleted", extra={"contractor_id": contractor_id})
