"""Shared fixtures: in-memory database, seed rows and request builders"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from medschedule.database import Base, enable_sqlite_foreign_keys
from medschedule.models import Doctor, MedStore, Patient
from medschedule.domain.schedules.schemas import MedicineItemIn, ScheduleCreate, ScheduleUpdate


def make_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    return engine, sessionmaker(autocommit=False, autoflush=False, bind=engine)


def seed_directory(db):
    """One doctor, one med-store and two patients"""
    doctor = Doctor(name="Dr. Meera Rao", email="meera.rao@example.com")
    med_store = MedStore(name="CityCare Pharmacy", email="orders@citycare.example.com")
    patient = Patient(name="Arjun Mehta", email="arjun@example.com")
    other_patient = Patient(name="Lina Park", email="lina.park@example.com")
    db.add_all([doctor, med_store, patient, other_patient])
    db.commit()
    return doctor, med_store, patient, other_patient


def item(name="Amoxicillin", dosage="250mg", times=2, gap=1, notes=None, item_id=None):
    return MedicineItemIn(
        id=item_id,
        medicineName=name,
        dosage=dosage,
        timesPerDay=times,
        gapBetweenDays=gap,
        notes=notes,
    )


def create_request(patient_id, items=None, start="2024-01-01", days=10, notes=None):
    return ScheduleCreate(
        patientId=patient_id,
        startDate=start,
        numberOfDays=days,
        notes=notes,
        items=items if items is not None else [item()],
    )


def update_request(items, start="2024-01-01", days=10, notes=None, **extra):
    return ScheduleUpdate(startDate=start, numberOfDays=days, notes=notes, items=items, **extra)
