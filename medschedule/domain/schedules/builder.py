"""Assembles ready-to-persist schedule aggregates from create/update requests"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ...config import MAX_SCHEDULE_DAYS
from ...shared.roles import Author, AuthorType
from ...shared.validators import clean_text, coerce_int, is_blank, parse_calendar_date
from .exceptions import (
    EmptyItemList,
    InvalidDate,
    InvalidDuration,
    InvalidItem,
    ScheduleValidationError,
)
from .validator import ScheduleItemValidator

logger = logging.getLogger(__name__)


@dataclass
class ItemDraft:
    medicine_name: str
    dosage: str
    times_per_day: int
    gap_between_days: int
    position: int
    notes: Optional[str] = None
    id: Optional[int] = None  # None until persisted


@dataclass
class ScheduleDraft:
    start_date: date
    number_of_days: int
    items: list[ItemDraft]
    notes: Optional[str] = None
    patient_id: Optional[int] = None
    author: Optional[Author] = None


@dataclass
class ItemChangeSet:
    """How an incoming item list maps onto the items already stored"""

    updates: list[ItemDraft] = field(default_factory=list)
    inserts: list[ItemDraft] = field(default_factory=list)
    deletions: list[int] = field(default_factory=list)


def _is_empty_row(item) -> bool:
    return (
        item.id is None
        and is_blank(item.medicineName)
        and is_blank(item.dosage)
        and is_blank(item.timesPerDay)
        and is_blank(item.gapBetweenDays)
        and is_blank(item.notes)
    )


class ScheduleAggregateBuilder:
    """Pure request -> aggregate transformation; never touches the database"""

    @staticmethod
    def build(request, author: Optional[Author] = None) -> ScheduleDraft:
        """
        Validate a create or update request and assemble the aggregate.

        Completely empty item rows are dropped before validation.

        Raises:
            InvalidDate, InvalidDuration, EmptyItemList, InvalidItem
        """
        if author is not None and not isinstance(author.kind, AuthorType):
            raise ScheduleValidationError("Schedule author must be a doctor or a med-store")

        try:
            start_date = parse_calendar_date(request.startDate)
        except ValueError as e:
            raise InvalidDate(
                f"Invalid start date: {request.startDate!r}",
                errors=[{"field": "startDate", "reason": str(e)}],
            ) from e

        try:
            number_of_days = coerce_int(request.numberOfDays)
        except ValueError as e:
            raise InvalidDuration(
                f"Invalid number of days: {request.numberOfDays!r}",
                errors=[{"field": "numberOfDays", "reason": str(e)}],
            ) from e
        if number_of_days < 1:
            raise InvalidDuration(
                "Number of days must be at least 1",
                errors=[{"field": "numberOfDays", "reason": "Must be at least 1"}],
            )
        if number_of_days > MAX_SCHEDULE_DAYS:
            raise InvalidDuration(
                f"Number of days cannot exceed {MAX_SCHEDULE_DAYS}",
                errors=[{"field": "numberOfDays", "reason": f"Must be at most {MAX_SCHEDULE_DAYS}"}],
            )
        # Last calendar day must still be representable
        if (date.max - start_date).days < number_of_days - 1:
            raise InvalidDuration(
                "Schedule would end past the last supported date",
                errors=[{"field": "numberOfDays", "reason": "End date is out of range"}],
            )

        items = [item for item in (request.items or []) if not _is_empty_row(item)]
        if not items:
            raise EmptyItemList("A schedule needs at least one medicine item")

        ScheduleItemValidator.validate_items(items)

        return ScheduleDraft(
            patient_id=getattr(request, "patientId", None),
            author=author,
            start_date=start_date,
            number_of_days=number_of_days,
            notes=clean_text(request.notes),
            items=[
                ItemDraft(
                    id=item.id,
                    medicine_name=item.medicineName.strip(),
                    dosage=item.dosage.strip(),
                    times_per_day=coerce_int(item.timesPerDay),
                    gap_between_days=coerce_int(item.gapBetweenDays),
                    notes=clean_text(item.notes),
                    position=position,
                )
                for position, item in enumerate(items)
            ],
        )

    @staticmethod
    def diff_items(existing_ids: Iterable[int], items: list[ItemDraft]) -> ItemChangeSet:
        """
        Full-replace diff: ids kept are updated, items without id are
        inserted, stored ids missing from `items` are deleted.

        Raises:
            InvalidItem: for ids that are unknown to the schedule or repeated
        """
        existing = set(existing_ids)
        changes = ItemChangeSet()
        seen = set()
        errors = []

        for draft in items:
            if draft.id is None:
                changes.inserts.append(draft)
                continue
            if draft.id not in existing:
                errors.append(
                    {
                        "index": draft.position,
                        "medicineName": draft.medicine_name,
                        "field": "id",
                        "reason": f"Item {draft.id} does not belong to this schedule",
                    }
                )
            elif draft.id in seen:
                errors.append(
                    {
                        "index": draft.position,
                        "medicineName": draft.medicine_name,
                        "field": "id",
                        "reason": f"Item {draft.id} appears more than once",
                    }
                )
            else:
                seen.add(draft.id)
                changes.updates.append(draft)

        if errors:
            raise InvalidItem("Invalid medicine item identity", errors=errors)

        changes.deletions = sorted(existing - seen)
        logger.debug(
            f"Item diff: {len(changes.updates)} update(s), {len(changes.inserts)} insert(s), "
            f"{len(changes.deletions)} deletion(s)"
        )
        return changes
