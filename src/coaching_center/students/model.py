from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Gender


@dataclass(frozen=True)
class Student:
    """Domain entity: a student enrolled by one operator."""

    student_id: int
    owner_id: int
    full_name: str
    email: str
    phone_number: str
    gender: Gender
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "fullName": self.full_name,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "gender": self.gender.value,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
