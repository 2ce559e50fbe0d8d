from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import MealType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one meal attendance entry.

    A single entry carries ``student_id``; a batch entry carries
    ``student_ids`` and leaves ``student_id`` empty. ``students`` holds
    (id, full name) pairs filled in by the service for display; it is not
    stored.
    """

    attendance_id: int
    owner_id: int
    attendance_date: date
    meal_type: MealType
    is_batch: bool = False
    is_present: bool = True
    student_id: Optional[int] = None
    student_ids: tuple[int, ...] = field(default_factory=tuple)
    students: tuple[tuple[int, str], ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None

    @property
    def member_ids(self) -> tuple[int, ...]:
        if self.is_batch:
            return self.student_ids
        return (self.student_id,) if self.student_id is not None else ()

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "studentIds": list(self.student_ids),
            "students": [{"id": sid, "fullName": name} for sid, name in self.students],
            "attendanceDate": self.attendance_date.isoformat(),
            "isPresent": self.is_present,
            "isBatch": self.is_batch,
            "mealType": self.meal_type.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
