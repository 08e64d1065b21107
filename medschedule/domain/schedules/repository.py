"""Medicine schedule repository - Database operations for schedules and their items"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.orm.exc import StaleDataError

from ...models import MedicineSchedule, ScheduledMedicineItem
from ...shared.roles import Author, AuthorType
from .builder import ItemChangeSet, ItemDraft, ScheduleDraft
from .exceptions import (
    ConstraintViolation,
    ScheduleNotFound,
    StaleSchedule,
    TransactionFailure,
)

logger = logging.getLogger(__name__)


def _new_item(draft: ItemDraft) -> ScheduledMedicineItem:
    return ScheduledMedicineItem(
        position=draft.position,
        medicine_name=draft.medicine_name,
        dosage=draft.dosage,
        times_per_day=draft.times_per_day,
        gap_between_days=draft.gap_between_days,
        notes=draft.notes,
    )


class ScheduleRepository:
    """Repository for medicine schedule database operations"""

    @staticmethod
    def _query(db: Session):
        return db.query(MedicineSchedule).options(
            selectinload(MedicineSchedule.items),
            joinedload(MedicineSchedule.patient),
            joinedload(MedicineSchedule.doctor),
            joinedload(MedicineSchedule.med_store),
        )

    @staticmethod
    def _commit(db: Session, action: str) -> None:
        """Commit the unit of work, rolling everything back on failure"""
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"⚠️ Constraint violation during schedule {action}: {e.orig}")
            raise ConstraintViolation(
                f"Schedule {action} violates a storage constraint (unknown patient or author?)"
            ) from e
        except StaleDataError as e:
            db.rollback()
            logger.warning(f"⚠️ Concurrent change detected during schedule {action}: {str(e)}")
            raise StaleSchedule(
                "Schedule was changed by someone else, reload it and try again"
            ) from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Schedule {action} failed and was rolled back: {str(e)}")
            raise TransactionFailure(f"Schedule {action} failed, no changes were saved") from e

    @staticmethod
    def get_schedule_by_id(db: Session, schedule_id: int) -> Optional[MedicineSchedule]:
        return ScheduleRepository._query(db).filter(MedicineSchedule.id == schedule_id).first()

    @staticmethod
    def get_schedule(db: Session, schedule_id: int) -> MedicineSchedule:
        """Get a schedule with its items or raise ScheduleNotFound"""
        schedule = ScheduleRepository.get_schedule_by_id(db, schedule_id)
        if not schedule:
            raise ScheduleNotFound(f"Schedule {schedule_id} not found")
        return schedule

    @staticmethod
    def find_by_author(db: Session, author: Author) -> list[MedicineSchedule]:
        """All schedules written by one doctor or med-store, newest first"""
        query = ScheduleRepository._query(db).filter(
            MedicineSchedule.scheduler_type == author.kind.value
        )
        if author.kind == AuthorType.DOCTOR:
            query = query.filter(MedicineSchedule.doctor_id == author.id)
        else:
            query = query.filter(MedicineSchedule.med_store_id == author.id)

        return query.order_by(
            MedicineSchedule.created_at.desc(), MedicineSchedule.id.desc()
        ).all()

    @staticmethod
    def find_by_patient(db: Session, patient_id: int) -> list[MedicineSchedule]:
        """All schedules of a patient, newest first"""
        return (
            ScheduleRepository._query(db)
            .filter(MedicineSchedule.patient_id == patient_id)
            .order_by(MedicineSchedule.created_at.desc(), MedicineSchedule.id.desc())
            .all()
        )

    @staticmethod
    def create(db: Session, draft: ScheduleDraft) -> MedicineSchedule:
        """Insert the schedule and all of its items in one transaction"""
        schedule = MedicineSchedule(
            patient_id=draft.patient_id,
            start_date=draft.start_date,
            number_of_days=draft.number_of_days,
            notes=draft.notes,
        )
        schedule.author = draft.author
        schedule.items = [_new_item(item) for item in draft.items]

        db.add(schedule)
        ScheduleRepository._commit(db, "create")
        db.refresh(schedule)
        return schedule

    @staticmethod
    def update(
        db: Session,
        schedule: MedicineSchedule,
        draft: ScheduleDraft,
        changes: ItemChangeSet,
    ) -> MedicineSchedule:
        """
        Replace the schedule's dates, notes and item set in one transaction.

        Items listed in `changes.updates` keep their identity, inserts get new
        ids and deletions are removed. Patient and author are never written.

        Raises:
            StaleSchedule: the stored row moved past the version loaded into `schedule`
        """
        current_items = {item.id: item for item in schedule.items}

        schedule.start_date = draft.start_date
        schedule.number_of_days = draft.number_of_days
        schedule.notes = draft.notes
        # Always emit the row UPDATE so the version check and bump run
        # even when only items changed
        schedule.updated_at = func.now()

        for item_draft in changes.updates:
            item = current_items[item_draft.id]
            item.position = item_draft.position
            item.medicine_name = item_draft.medicine_name
            item.dosage = item_draft.dosage
            item.times_per_day = item_draft.times_per_day
            item.gap_between_days = item_draft.gap_between_days
            item.notes = item_draft.notes

        for item_id in changes.deletions:
            schedule.items.remove(current_items[item_id])

        for item_draft in changes.inserts:
            schedule.items.append(_new_item(item_draft))

        ScheduleRepository._commit(db, "update")
        db.refresh(schedule)
        return schedule

    @staticmethod
    def delete(db: Session, schedule: MedicineSchedule) -> None:
        """Delete a schedule; its items go with it"""
        db.delete(schedule)
        ScheduleRepository._commit(db, "delete")
