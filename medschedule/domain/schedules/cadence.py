"""
Dose cadence calculations.

A schedule item with gap N is taken on day offset 0 and then every N+1 days
until the schedule's last day. The calendar built from these days is derived
on every read and never stored, so editing a schedule changes every later
view without a migration step.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterator, Optional

from ...config import FIRST_DOSE_HOUR


class ActiveDays:
    """
    Days on which an item is taken, as a lazy and restartable sequence.

    Iterating twice yields the same dates in the same order.
    """

    def __init__(self, start_date: date, number_of_days: int, gap_between_days: int):
        self.start_date = start_date
        self.number_of_days = number_of_days
        self.step = gap_between_days + 1

    def offsets(self) -> range:
        return range(0, self.number_of_days, self.step)

    def __iter__(self) -> Iterator[date]:
        for offset in self.offsets():
            yield self.start_date + timedelta(days=offset)

    def __len__(self) -> int:
        return len(self.offsets())

    def __contains__(self, day: object) -> bool:
        if not isinstance(day, date):
            return False
        return (day - self.start_date).days in self.offsets()

    def __repr__(self) -> str:
        return (
            f"ActiveDays(start_date={self.start_date!r}, "
            f"number_of_days={self.number_of_days}, step={self.step})"
        )


def compute_active_days(start_date: date, number_of_days: int, gap_between_days: int) -> ActiveDays:
    """
    Dates on which a dose is due.

    numberOfDays >= 1 and gapBetweenDays >= 0 are checked before this is
    reached. A gap longer than the schedule leaves only the start date.
    """
    return ActiveDays(start_date, number_of_days, gap_between_days)


def default_dose_times(times_per_day: int, first_hour: int = FIRST_DOSE_HOUR) -> list[str]:
    """Evenly spread HH:MM slots for the day's doses, starting at `first_hour`"""
    interval_hours = 24 / times_per_day
    return [f"{int(first_hour + i * interval_hours) % 24:02d}:00" for i in range(times_per_day)]


def schedule_end_date(start_date: date, number_of_days: int) -> date:
    """Last day (inclusive) of a schedule"""
    return start_date + timedelta(days=number_of_days - 1)


def schedule_status(start_date: date, number_of_days: int, today: Optional[date] = None) -> str:
    today = today or date.today()
    if today < start_date:
        return "upcoming"
    if today > schedule_end_date(start_date, number_of_days):
        return "completed"
    return "active"


@dataclass
class DoseEvent:
    date: date
    day_offset: int
    item_id: Optional[int]
    medicine_name: str
    dosage: str
    doses: int
    dose_times: list[str] = field(default_factory=list)
    notes: Optional[str] = None


def build_dose_calendar(
    schedule,
    window_start: Optional[date] = None,
    window_end: Optional[date] = None,
) -> list[DoseEvent]:
    """
    Materialize the dose calendar of a schedule, ordered by date then item.

    Works on anything exposing start_date, number_of_days and items with
    the ScheduledMedicineItem attribute names.
    """
    events = []
    for item in schedule.items:
        times = default_dose_times(item.times_per_day)
        for day in compute_active_days(
            schedule.start_date, schedule.number_of_days, item.gap_between_days
        ):
            if window_start and day < window_start:
                continue
            if window_end and day > window_end:
                break
            events.append(
                DoseEvent(
                    date=day,
                    day_offset=(day - schedule.start_date).days,
                    item_id=item.id,
                    medicine_name=item.medicine_name,
                    dosage=item.dosage,
                    doses=item.times_per_day,
                    dose_times=list(times),
                    notes=item.notes,
                )
            )

    # sort is stable, so items keep their schedule order within a day
    events.sort(key=lambda event: event.date)
    return events
