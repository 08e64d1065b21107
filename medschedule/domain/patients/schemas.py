"""Patient lookup schemas"""

from typing import Optional

from pydantic import BaseModel


class PatientLookupResponse(BaseModel):
    id: int
    name: str
    email: Optional[str] = None

    class Config:
        from_attributes = True
