from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .shared.roles import Author, AuthorType


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    medicine_schedules = relationship("MedicineSchedule", back_populates="patient")


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    medicine_schedules = relationship("MedicineSchedule", back_populates="doctor")


class MedStore(Base):
    __tablename__ = "med_stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    medicine_schedules = relationship("MedicineSchedule", back_populates="med_store")


class MedicineSchedule(Base):
    __tablename__ = "medicine_schedules"
    __table_args__ = (
        # Exactly one author FK is set and it matches the discriminant
        CheckConstraint(
            "(scheduler_type = 'DOCTOR' AND doctor_id IS NOT NULL AND med_store_id IS NULL)"
            " OR (scheduler_type = 'MEDSTORE' AND med_store_id IS NOT NULL AND doctor_id IS NULL)",
            name="ck_medicine_schedules_single_author",
        ),
        CheckConstraint("number_of_days >= 1", name="ck_medicine_schedules_days_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(
        Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scheduler_type = Column(String(20), nullable=False)  # DOCTOR, MEDSTORE
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=True, index=True)
    med_store_id = Column(Integer, ForeignKey("med_stores.id"), nullable=True, index=True)
    start_date = Column(Date, nullable=False)
    number_of_days = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    version = Column(Integer, nullable=False, default=1)  # Bumped on every UPDATE
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    patient = relationship("Patient", back_populates="medicine_schedules")
    doctor = relationship("Doctor", back_populates="medicine_schedules")
    med_store = relationship("MedStore", back_populates="medicine_schedules")
    items = relationship(
        "ScheduledMedicineItem",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="ScheduledMedicineItem.position",
    )

    # UPDATEs carry "WHERE version = <loaded>"; a concurrent writer makes them match no row
    __mapper_args__ = {"version_id_col": version}

    @property
    def author(self) -> Author:
        kind = AuthorType(self.scheduler_type)
        if kind == AuthorType.DOCTOR:
            return Author(kind, self.doctor_id)
        return Author(kind, self.med_store_id)

    @author.setter
    def author(self, value: Author) -> None:
        self.scheduler_type = value.kind.value
        self.doctor_id = value.id if value.kind == AuthorType.DOCTOR else None
        self.med_store_id = value.id if value.kind == AuthorType.MEDSTORE else None

    @property
    def author_name(self):
        owner = self.doctor if self.author.kind == AuthorType.DOCTOR else self.med_store
        return owner.name if owner else None


class ScheduledMedicineItem(Base):
    __tablename__ = "scheduled_medicine_items"
    __table_args__ = (
        CheckConstraint("times_per_day >= 1", name="ck_scheduled_items_times_positive"),
        CheckConstraint("gap_between_days >= 0", name="ck_scheduled_items_gap_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    medicine_schedule_id = Column(
        Integer,
        ForeignKey("medicine_schedules.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)  # Order within the schedule
    medicine_name = Column(String(255), nullable=False)
    dosage = Column(String(100), nullable=False)  # Free text, e.g. "500mg", "1 tablet"
    times_per_day = Column(Integer, nullable=False)
    gap_between_days = Column(Integer, nullable=False, default=0)
    notes = Column(String(1000), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    schedule = relationship("MedicineSchedule", back_populates="items")
