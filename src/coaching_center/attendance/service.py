from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.pagination import Page, PageRequest
from ..common.validators import require_choice
from ..core.constants import DEFAULT_MEAL_TYPE
from ..core.enums import MealType
from ..core.exceptions import NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Meal attendance for one operator's students.

    Entries are either single (one student) or batch (a list of students
    marked together). Removing the last student of a batch deletes it.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._students = students
        self._clock = clock

    def _parse_date(self, value) -> date:
        if value in (None, ""):
            return self._clock().date()
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return parse_iso_date(str(value)[:10])
        except ValueError:
            raise ValidationError("Attendance date must use the YYYY-MM-DD format")

    @staticmethod
    def _parse_present(value, default: bool) -> bool:
        if value is None:
            return default
        if not isinstance(value, bool):
            raise ValidationError("isPresent must be true or false")
        return value

    @staticmethod
    def _parse_meal(value) -> Optional[MealType]:
        if value in (None, ""):
            return None
        return require_choice(value, MealType, "Meal type")

    def _require_batch_students(self, owner_id: int, student_ids) -> Tuple[List[int], Dict[int, str]]:
        if not isinstance(student_ids, (list, tuple)) or not student_ids:
            raise ValidationError("At least one student is required")
        try:
            ids = list(dict.fromkeys(int(i) for i in student_ids))
        except (TypeError, ValueError):
            raise ValidationError("Some students not found or unauthorized")

        names = self._students.get_names_by_ids(owner_id, ids)
        if len(names) != len(ids):
            raise ValidationError("Some students not found or unauthorized")
        return ids, names

    def _with_students(self, owner_id: int, records: Sequence[AttendanceRecord]) -> List[AttendanceRecord]:
        wanted = {sid for r in records for sid in r.member_ids}
        names = self._students.get_names_by_ids(owner_id, sorted(wanted)) if wanted else {}
        return [
            replace(r, students=tuple((sid, names[sid]) for sid in r.member_ids if sid in names))
            for r in records
        ]

    def _reload(self, owner_id: int, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_for_owner(owner_id, attendance_id)
        return self._with_students(owner_id, [record])[0]

    def list_attendance(
        self,
        *,
        owner_id: int,
        page: PageRequest,
        attendance_date: Optional[str] = None,
        is_batch: Optional[bool] = None,
    ) -> Page[AttendanceRecord]:
        owner_id = int(owner_id)
        items, total = self._attendance.list_page(
            owner_id,
            page,
            attendance_date=self._parse_date(attendance_date) if attendance_date else None,
            is_batch=is_batch,
        )
        return Page(items=self._with_students(owner_id, items), total=total, request=page)

    def add_batch_attendance(
        self,
        *,
        owner_id: int,
        student_ids,
        attendance_date=None,
        is_present=None,
        meal_type=None,
    ) -> AttendanceRecord:
        owner_id = int(owner_id)
        ids, _ = self._require_batch_students(owner_id, student_ids)

        attendance_id = self._attendance.create(
            owner_id=owner_id,
            attendance_date=self._parse_date(attendance_date),
            meal_type=self._parse_meal(meal_type) or MealType(DEFAULT_MEAL_TYPE),
            is_present=self._parse_present(is_present, True),
            is_batch=True,
            student_ids=ids,
        )
        logger.info("Operator %s added batch attendance %s (%d students)", owner_id, attendance_id, len(ids))
        return self._reload(owner_id, attendance_id)

    def add_single_attendance(
        self,
        *,
        owner_id: int,
        student_id,
        attendance_date=None,
        is_present=None,
        meal_type=None,
    ) -> AttendanceRecord:
        if not student_id:
            raise ValidationError("Student ID is required")
        owner_id = int(owner_id)
        try:
            sid = int(student_id)
        except (TypeError, ValueError):
            raise NotFoundError("Student not found or unauthorized")
        if not self._students.get_for_owner(owner_id, sid):
            raise NotFoundError("Student not found or unauthorized")

        attendance_id = self._attendance.create(
            owner_id=owner_id,
            attendance_date=self._parse_date(attendance_date),
            meal_type=self._parse_meal(meal_type) or MealType(DEFAULT_MEAL_TYPE),
            is_present=self._parse_present(is_present, True),
            is_batch=False,
            student_id=sid,
        )
        logger.info("Operator %s added attendance %s for student %s", owner_id, attendance_id, sid)
        return self._reload(owner_id, attendance_id)

    def update_attendance(
        self,
        *,
        owner_id: int,
        attendance_id: int,
        student_ids=None,
        attendance_date=None,
        is_present=None,
        meal_type=None,
    ) -> AttendanceRecord:
        owner_id = int(owner_id)
        current = self._attendance.get_for_owner(owner_id, int(attendance_id))
        if not current:
            raise NotFoundError("Attendance record not found")

        # Member lists only exist on batch entries; single entries ignore them.
        new_ids = current.student_ids
        if student_ids is not None and current.is_batch:
            new_ids = tuple(self._require_batch_students(owner_id, student_ids)[0])

        updated = replace(
            current,
            student_ids=new_ids,
            attendance_date=self._parse_date(attendance_date) if attendance_date else current.attendance_date,
            is_present=self._parse_present(is_present, current.is_present),
            meal_type=self._parse_meal(meal_type) or current.meal_type,
        )
        self._attendance.update(updated)
        logger.info("Operator %s updated attendance %s", owner_id, current.attendance_id)
        return self._reload(owner_id, current.attendance_id)

    def delete_attendance(self, *, owner_id: int, attendance_id: int) -> None:
        if not self._attendance.delete(int(owner_id), int(attendance_id)):
            raise NotFoundError("Attendance record not found")
        logger.info("Operator %s deleted attendance %s", owner_id, attendance_id)

    def remove_student_from_batch(self, *, owner_id: int, attendance_id: int, student_id) -> Optional[AttendanceRecord]:
        """Drop one student from a batch; returns None when the batch was deleted."""
        owner_id = int(owner_id)
        current = self._attendance.get_for_owner(owner_id, int(attendance_id))
        if not current or not current.is_batch:
            raise NotFoundError("Batch attendance record not found")

        try:
            sid = int(student_id)
        except (TypeError, ValueError):
            raise ValidationError("Student not found in this batch")
        if sid not in current.student_ids:
            raise ValidationError("Student not found in this batch")

        remaining = tuple(i for i in current.student_ids if i != sid)
        if not remaining:
            self._attendance.delete(owner_id, current.attendance_id)
            logger.info("Deleted batch attendance %s: no students remaining", current.attendance_id)
            return None

        self._attendance.update(replace(current, student_ids=remaining))
        logger.info("Removed student %s from batch attendance %s", sid, current.attendance_id)
        return self._reload(owner_id, current.attendance_id)
