"""
Medicine Schedules Domain

Doctors and med-stores author dosing schedules for patients. A schedule is
a start date, a number of days and one or more medicine items; the dose
calendar is derived from it on demand and never stored.

Structure:
- cadence.py        Active-day arithmetic and dose calendar
- validator.py      Per-item field rules
- builder.py        Request -> aggregate, full-replace item diff
- repository.py     Transactional persistence
- service.py        Write path and access rules
- query_service.py  Dashboard and calendar projections
- router.py         /medicine-schedules endpoints
"""

from .router import router

__all__ = ["router"]
