"""Patient repository - Lookup queries used by schedule authors"""

from sqlalchemy.orm import Session

from ...models import Patient


class PatientRepository:
    """Repository for patient lookups"""

    @staticmethod
    def search_patients(db: Session, search: str, limit: int) -> list[Patient]:
        """Case-insensitive match on name or email"""
        search_term = f"%{search.lower()}%"
        return (
            db.query(Patient)
            .filter((Patient.name.ilike(search_term)) | (Patient.email.ilike(search_term)))
            .order_by(Patient.name.asc(), Patient.id.asc())
            .limit(limit)
            .all()
        )
