"""Medicine schedule router - FastAPI endpoints for schedules and dose calendars"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import Principal, get_current_principal, require_roles
from ...database import get_db
from ...shared.roles import Role
from .query_service import ScheduleQueryService, project_schedule
from .schemas import (
    PatientAgendaResponse,
    ScheduleCalendarResponse,
    ScheduleCreate,
    ScheduleResponse,
    ScheduleUpdate,
)
from .service import ScheduleService, ensure_can_view_patient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/medicine-schedules", tags=["Medicine Schedules"])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db)


def get_query_service(db: Session = Depends(get_db)) -> ScheduleQueryService:
    """Dependency injection for ScheduleQueryService"""
    return ScheduleQueryService(db)


# ============================================================================
# LISTS
# ============================================================================


@router.get("/mine", response_model=list[ScheduleResponse])
async def get_my_schedules(
    principal: Principal = Depends(require_roles(Role.DOCTOR, Role.MEDSTORE)),
    queries: ScheduleQueryService = Depends(get_query_service),
):
    """Schedules created by the calling doctor or med-store, newest first"""
    return queries.list_for_author(principal.as_author())


@router.get("/patient", response_model=list[ScheduleResponse])
async def get_own_schedules(
    principal: Principal = Depends(require_roles(Role.PATIENT)),
    queries: ScheduleQueryService = Depends(get_query_service),
):
    """Schedules of the calling patient"""
    return queries.list_for_patient(principal.user_id)


@router.get("/patient/{patient_id}", response_model=list[ScheduleResponse])
async def get_patient_schedules(
    patient_id: int,
    principal: Principal = Depends(get_current_principal),
    queries: ScheduleQueryService = Depends(get_query_service),
):
    """Schedules of a patient, newest first"""
    ensure_can_view_patient(principal, patient_id)
    return queries.list_for_patient(patient_id)


@router.get("/patient/{patient_id}/agenda", response_model=PatientAgendaResponse)
async def get_patient_agenda(
    patient_id: int,
    on_date: Optional[date] = Query(None, alias="date"),
    principal: Principal = Depends(get_current_principal),
    queries: ScheduleQueryService = Depends(get_query_service),
):
    """Doses due for a patient on one day (today by default)"""
    ensure_can_view_patient(principal, patient_id)
    return queries.agenda_for_patient(patient_id, on_date or date.today())


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.post("", response_model=ScheduleResponse, status_code=201)
async def create_schedule(
    data: ScheduleCreate,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Create a medicine schedule for a patient"""
    schedule = service.create_schedule(data, principal)
    return project_schedule(schedule)


@router.get("/{schedule_id}", response_model=ScheduleResponse)
async def get_schedule(
    schedule_id: int,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    return project_schedule(service.get_schedule(schedule_id, principal))


@router.get("/{schedule_id}/calendar", response_model=ScheduleCalendarResponse)
async def get_schedule_calendar(
    schedule_id: int,
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Concrete dose calendar of a schedule, computed on request"""
    schedule = service.get_schedule(schedule_id, principal)
    return ScheduleQueryService.calendar_for_schedule(schedule, date_from, date_to)


@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    data: ScheduleUpdate,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Replace dates, notes and the full item list of a schedule"""
    schedule = service.update_schedule(schedule_id, data, principal)
    return project_schedule(schedule)


@router.delete("/{schedule_id}", status_code=204)
async def delete_schedule(
    schedule_id: int,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    service.delete_schedule(schedule_id, principal)
    return Response(status_code=204)
