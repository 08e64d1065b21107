"""Medicine schedule service - Write path and access rules for schedules"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import Principal
from ...models import MedicineSchedule
from ...shared.roles import Role
from .builder import ScheduleAggregateBuilder
from .exceptions import ImmutableField, StaleSchedule
from .repository import ScheduleRepository
from .schemas import ScheduleCreate, ScheduleUpdate

logger = logging.getLogger(__name__)


def is_schedule_author(schedule: MedicineSchedule, principal: Principal) -> bool:
    return principal.as_author() == schedule.author


def ensure_can_view_patient(principal: Principal, patient_id: int) -> None:
    """Patients see their own schedules; admins and care providers see any"""
    if principal.is_admin or principal.is_care_provider:
        return
    if principal.role == Role.PATIENT and principal.user_id == patient_id:
        return
    raise HTTPException(status_code=403, detail="Not authorized to view these schedules")


class ScheduleService:
    """Service layer for medicine schedule business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleRepository()
        self.builder = ScheduleAggregateBuilder()

    def get_schedule(self, schedule_id: int, principal: Principal) -> MedicineSchedule:
        """Get one schedule if the caller may read it"""
        schedule = self.repo.get_schedule(self.db, schedule_id)
        if is_schedule_author(schedule, principal):
            return schedule
        ensure_can_view_patient(principal, schedule.patient_id)
        return schedule

    def _get_for_change(self, schedule_id: int, principal: Principal, action: str) -> MedicineSchedule:
        schedule = self.repo.get_schedule(self.db, schedule_id)
        if not (principal.is_admin or is_schedule_author(schedule, principal)):
            logger.warning(
                f"⚠️ {principal.role.value} {principal.user_id} tried to {action} schedule {schedule_id}"
            )
            raise HTTPException(status_code=403, detail=f"Not authorized to {action} this schedule")
        return schedule

    def create_schedule(self, data: ScheduleCreate, principal: Principal) -> MedicineSchedule:
        """Create a schedule authored by the calling doctor or med-store"""
        author = principal.as_author()
        if author is None:
            raise HTTPException(
                status_code=403,
                detail="Only doctors and med-stores can create medicine schedules",
            )

        logger.info(
            f"📝 Creating medicine schedule for patient {data.patientId} "
            f"by {author.kind.value} {author.id}"
        )
        draft = self.builder.build(data, author=author)
        schedule = self.repo.create(self.db, draft)
        logger.info(f"✅ Medicine schedule {schedule.id} created with {len(schedule.items)} item(s)")
        return schedule

    def update_schedule(
        self, schedule_id: int, data: ScheduleUpdate, principal: Principal
    ) -> MedicineSchedule:
        """
        Full-replace update of dates, notes and items.

        Patient and author never change; a request naming another patient is
        rejected. When expectedVersion is sent, a schedule changed since that
        version is rejected instead of overwritten.
        """
        schedule = self._get_for_change(schedule_id, principal, "update")

        if data.patientId is not None and data.patientId != schedule.patient_id:
            raise ImmutableField(
                "The patient of a schedule cannot be changed",
                errors=[{"field": "patientId", "reason": "Patient is fixed at creation"}],
            )

        if data.expectedVersion is not None and data.expectedVersion != schedule.version:
            logger.warning(
                f"⚠️ Stale update of schedule {schedule_id}: "
                f"expected v{data.expectedVersion}, stored v{schedule.version}"
            )
            raise StaleSchedule(
                f"Schedule {schedule_id} was changed by someone else (version {schedule.version})"
            )

        draft = self.builder.build(data)
        changes = self.builder.diff_items([item.id for item in schedule.items], draft.items)

        logger.info(
            f"📝 Updating medicine schedule {schedule_id}: {len(changes.updates)} kept, "
            f"{len(changes.inserts)} new, {len(changes.deletions)} removed"
        )
        return self.repo.update(self.db, schedule, draft, changes)

    def delete_schedule(self, schedule_id: int, principal: Principal) -> None:
        schedule = self._get_for_change(schedule_id, principal, "delete")
        self.repo.delete(self.db, schedule)
        logger.info(f"🗑️ Medicine schedule {schedule_id} deleted by {principal.role.value} {principal.user_id}")
