from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence, Tuple

from ..common.pagination import PageRequest
from ..core.enums import MealType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_owner(self, owner_id: int, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_page(
        self,
        owner_id: int,
        page: PageRequest,
        *,
        attendance_date: Optional[date] = None,
        is_batch: Optional[bool] = None,
    ) -> Tuple[Sequence[AttendanceRecord], int]:
        """Newest attendance date first."""

        raise NotImplementedError

    def create(
        self,
        *,
        owner_id: int,
        attendance_date: date,
        meal_type: MealType,
        is_present: bool,
        is_batch: bool,
        student_id: Optional[int] = None,
        student_ids: Sequence[int] = (),
    ) -> int:
        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> bool:
        raise NotImplementedError

    def delete(self, owner_id: int, attendance_id: int) -> bool:
        raise NotImplementedError
