from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OverdueStudent:
    """An active student with no payment row for the current period."""

    student_id: int
    student_name: str

    def to_dict(self) -> dict:
        return {"studentId": self.student_id, "studentName": self.student_name}
