"""Medicine schedule errors, rendered to clients by the handler in main.py"""

from typing import Optional


class ScheduleError(Exception):
    """Base class for medicine schedule failures"""

    status_code = 500
    code = "SCHEDULE_ERROR"

    def __init__(self, message: str, errors: Optional[list[dict]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message, "errors": self.errors}


class ScheduleValidationError(ScheduleError):
    """Client-correctable request problem, raised before any write"""

    status_code = 400
    code = "VALIDATION_ERROR"


class InvalidItem(ScheduleValidationError):
    code = "INVALID_ITEM"


class InvalidDate(ScheduleValidationError):
    code = "INVALID_DATE"


class InvalidDuration(ScheduleValidationError):
    code = "INVALID_DURATION"


class EmptyItemList(ScheduleValidationError):
    code = "EMPTY_ITEM_LIST"


class ImmutableField(ScheduleValidationError):
    code = "IMMUTABLE_FIELD"


class ScheduleNotFound(ScheduleError):
    status_code = 404
    code = "NOT_FOUND"


class ConstraintViolation(ScheduleError):
    """Dangling patient/author reference or another storage constraint"""

    status_code = 409
    code = "CONSTRAINT_VIOLATION"


class StaleSchedule(ScheduleError):
    status_code = 409
    code = "STALE_SCHEDULE"


class TransactionFailure(ScheduleError):
    status_code = 500
    code = "TRANSACTION_FAILURE"
