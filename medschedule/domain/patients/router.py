"""Patient lookup router - lets schedule authors find a patient to schedule for"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Principal, require_roles
from ...config import PATIENT_SEARCH_LIMIT
from ...database import get_db
from ...shared.roles import Role
from .repository import PatientRepository
from .schemas import PatientLookupResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["Patients"])

MIN_SEARCH_LENGTH = 2


@router.get("/search", response_model=list[PatientLookupResponse])
async def search_patients(
    q: str = Query("", description="Name or email fragment"),
    principal: Principal = Depends(require_roles(Role.DOCTOR, Role.MEDSTORE, Role.ADMIN)),
    db: Session = Depends(get_db),
):
    """Candidate patients for a new schedule"""
    term = q.strip()
    if len(term) < MIN_SEARCH_LENGTH:
        return []

    patients = PatientRepository.search_patients(db, term, PATIENT_SEARCH_LIMIT)
    logger.debug(f"Patient search by {principal.role.value} {principal.user_id}: {len(patients)} match(es)")
    return [PatientLookupResponse.model_validate(p) for p in patients]
