"""Caller roles and the schedule author type"""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    DOCTOR = "DOCTOR"
    MEDSTORE = "MEDSTORE"
    PATIENT = "PATIENT"
    ADMIN = "ADMIN"


class AuthorType(str, Enum):
    """Who may author a medicine schedule"""

    DOCTOR = "DOCTOR"
    MEDSTORE = "MEDSTORE"


@dataclass(frozen=True)
class Author:
    """A schedule author: Doctor(id) or MedStore(id), told apart by `kind`"""

    kind: AuthorType
    id: int

    @classmethod
    def doctor(cls, doctor_id: int) -> "Author":
        return cls(AuthorType.DOCTOR, doctor_id)

    @classmethod
    def med_store(cls, med_store_id: int) -> "Author":
        return cls(AuthorType.MEDSTORE, med_store_id)
