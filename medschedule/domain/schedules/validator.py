"""Validation of single medicine items"""

import logging

from ...config import MAX_SCHEDULE_DAYS, MAX_TIMES_PER_DAY
from ...shared.validators import coerce_int, is_blank
from .exceptions import InvalidItem

logger = logging.getLogger(__name__)


def _check_count(errors: list, field: str, label: str, value, minimum: int, maximum: int) -> None:
    if is_blank(value):
        errors.append({"field": field, "reason": f"{label} is required"})
        return
    try:
        number = coerce_int(value)
    except ValueError:
        errors.append({"field": field, "reason": f"{label} must be a whole number"})
        return
    if number < minimum:
        errors.append({"field": field, "reason": f"{label} must be at least {minimum}"})
    elif number > maximum:
        errors.append({"field": field, "reason": f"{label} cannot exceed {maximum}"})


class ScheduleItemValidator:
    """Checks medicine items against the schedule's field rules. No side effects."""

    @staticmethod
    def validate(item) -> list[dict]:
        """Return the field errors of one item; an empty list means it is valid"""
        errors = []

        if is_blank(item.medicineName):
            errors.append({"field": "medicineName", "reason": "Medicine name is required"})
        if is_blank(item.dosage):
            errors.append({"field": "dosage", "reason": "Dosage is required"})

        _check_count(errors, "timesPerDay", "Times per day", item.timesPerDay, 1, MAX_TIMES_PER_DAY)
        # A gap longer than any schedule only ever yields the first day
        _check_count(
            errors, "gapBetweenDays", "Gap between days", item.gapBetweenDays, 0, MAX_SCHEDULE_DAYS
        )

        return errors

    @classmethod
    def validate_items(cls, items) -> None:
        """
        Validate a whole batch; one bad item rejects all of them.

        Raises:
            InvalidItem: listing every failing item with its index and fields
        """
        failures = []
        for index, item in enumerate(items):
            for error in cls.validate(item):
                failures.append(
                    {"index": index, "medicineName": item.medicineName or None, **error}
                )

        if failures:
            failed_indexes = sorted({f["index"] for f in failures})
            logger.warning(f"⚠️ Rejected medicine items at positions {failed_indexes}")
            names = ", ".join(
                items[i].medicineName.strip() if not is_blank(items[i].medicineName) else "Unnamed Item"
                for i in failed_indexes
            )
            raise InvalidItem(f"Invalid medicine item(s): {names}", errors=failures)
