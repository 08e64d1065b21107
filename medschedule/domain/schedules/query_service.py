"""Read-side projections of medicine schedules for dashboards and calendars"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import MedicineSchedule
from ...shared.roles import Author
from .cadence import DoseEvent, build_dose_calendar, schedule_end_date, schedule_status
from .exceptions import InvalidDate
from .repository import ScheduleRepository
from .schemas import (
    AuthorSummary,
    DoseEventResponse,
    MedicineItemResponse,
    PatientAgendaEntry,
    PatientAgendaResponse,
    PatientSummary,
    ScheduleCalendarResponse,
    ScheduleResponse,
)


def project_schedule(schedule: MedicineSchedule, today: Optional[date] = None) -> ScheduleResponse:
    """Schedule + items + patient/author display fields, without the dose calendar"""
    author = schedule.author
    patient = schedule.patient
    return ScheduleResponse(
        id=schedule.id,
        patientId=schedule.patient_id,
        schedulerType=author.kind.value,
        schedulerId=author.id,
        startDate=schedule.start_date,
        endDate=schedule_end_date(schedule.start_date, schedule.number_of_days),
        numberOfDays=schedule.number_of_days,
        notes=schedule.notes,
        status=schedule_status(schedule.start_date, schedule.number_of_days, today),
        version=schedule.version,
        itemCount=len(schedule.items),
        items=[
            MedicineItemResponse(
                id=item.id,
                medicineName=item.medicine_name,
                dosage=item.dosage,
                timesPerDay=item.times_per_day,
                gapBetweenDays=item.gap_between_days,
                notes=item.notes,
                position=item.position,
            )
            for item in schedule.items
        ],
        patient=(
            PatientSummary(id=patient.id, name=patient.name, email=patient.email)
            if patient
            else None
        ),
        author=AuthorSummary(type=author.kind.value, id=author.id, name=schedule.author_name),
        createdAt=schedule.created_at,
        updatedAt=schedule.updated_at,
    )


def _event_response(event: DoseEvent) -> dict:
    return {
        "date": event.date,
        "dayOffset": event.day_offset,
        "itemId": event.item_id,
        "medicineName": event.medicine_name,
        "dosage": event.dosage,
        "doses": event.doses,
        "doseTimes": event.dose_times,
        "notes": event.notes,
    }


class ScheduleQueryService:
    """Read-only schedule views; the dose calendar is only built on request"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleRepository()

    def list_for_author(self, author: Author) -> list[ScheduleResponse]:
        return [project_schedule(s) for s in self.repo.find_by_author(self.db, author)]

    def list_for_patient(self, patient_id: int) -> list[ScheduleResponse]:
        return [project_schedule(s) for s in self.repo.find_by_patient(self.db, patient_id)]

    @staticmethod
    def calendar_for_schedule(
        schedule: MedicineSchedule,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> ScheduleCalendarResponse:
        """Dose events of one schedule, optionally clipped to [date_from, date_to]"""
        if date_from and date_to and date_from > date_to:
            raise InvalidDate(
                "Calendar window start is after its end",
                errors=[{"field": "from", "reason": "Must not be after 'to'"}],
            )

        events = build_dose_calendar(schedule, date_from, date_to)
        return ScheduleCalendarResponse(
            scheduleId=schedule.id,
            startDate=schedule.start_date,
            endDate=schedule_end_date(schedule.start_date, schedule.number_of_days),
            totalDoses=sum(event.doses for event in events),
            events=[DoseEventResponse(**_event_response(event)) for event in events],
        )

    def agenda_for_patient(self, patient_id: int, on_date: date) -> PatientAgendaResponse:
        """Every dose due for a patient on one day, across all schedules"""
        entries = []
        for schedule in self.repo.find_by_patient(self.db, patient_id):
            if not (
                schedule.start_date
                <= on_date
                <= schedule_end_date(schedule.start_date, schedule.number_of_days)
            ):
                continue
            for event in build_dose_calendar(schedule, on_date, on_date):
                entries.append(PatientAgendaEntry(scheduleId=schedule.id, **_event_response(event)))

        return PatientAgendaResponse(patientId=patient_id, date=on_date, entries=entries)
