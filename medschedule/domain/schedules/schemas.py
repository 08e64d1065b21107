"""Medicine schedule schemas - Pydantic models for requests and responses

Request models only check JSON types. Field rules (non-empty names,
positive counts, parseable dates) are enforced by the item validator and
the aggregate builder so that a rejected batch reports every bad item.
"""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel


class MedicineItemIn(BaseModel):
    """One medicine line of a schedule request; `id` marks an existing item"""

    id: Optional[int] = None
    medicineName: Optional[str] = None
    dosage: Optional[str] = None
    timesPerDay: Optional[Union[int, str]] = None
    gapBetweenDays: Optional[Union[int, str]] = None
    notes: Optional[str] = None


class ScheduleCreate(BaseModel):
    """Schema for creating a medicine schedule"""

    patientId: int
    startDate: Optional[str] = None  # ISO-8601 date
    numberOfDays: Optional[Union[int, str]] = None
    notes: Optional[str] = None
    items: list[MedicineItemIn] = []


class ScheduleUpdate(BaseModel):
    """Full-replace update; items missing from `items` are deleted"""

    patientId: Optional[int] = None  # Must match the stored patient when sent
    startDate: Optional[str] = None
    numberOfDays: Optional[Union[int, str]] = None
    notes: Optional[str] = None
    items: list[MedicineItemIn] = []
    expectedVersion: Optional[int] = None


class MedicineItemResponse(BaseModel):
    id: int
    medicineName: str
    dosage: str
    timesPerDay: int
    gapBetweenDays: int
    notes: Optional[str] = None
    position: int

    class Config:
        from_attributes = True


class PatientSummary(BaseModel):
    id: int
    name: str
    email: Optional[str] = None


class AuthorSummary(BaseModel):
    type: str  # DOCTOR, MEDSTORE
    id: int
    name: Optional[str] = None


class ScheduleResponse(BaseModel):
    id: int
    patientId: int
    schedulerType: str
    schedulerId: int
    startDate: date
    endDate: date
    numberOfDays: int
    notes: Optional[str] = None
    status: str  # upcoming, active, completed
    version: int
    itemCount: int
    items: list[MedicineItemResponse]
    patient: Optional[PatientSummary] = None
    author: Optional[AuthorSummary] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class DoseEventResponse(BaseModel):
    date: date
    dayOffset: int
    itemId: Optional[int] = None
    medicineName: str
    dosage: str
    doses: int
    doseTimes: list[str]
    notes: Optional[str] = None


class ScheduleCalendarResponse(BaseModel):
    scheduleId: int
    startDate: date
    endDate: date
    totalDoses: int
    events: list[DoseEventResponse]


class PatientAgendaEntry(DoseEventResponse):
    scheduleId: int


class PatientAgendaResponse(BaseModel):
    patientId: int
    date: date
    entries: list[PatientAgendaEntry]
