from __future__ import annotations

import logging
from typing import Optional

from ..common.pagination import Page, PageRequest
from ..common.validators import (
    require_choice,
    require_email,
    require_min_length,
    require_non_empty,
    require_ten_digits,
)
from ..core.constants import MIN_FULL_NAME_LENGTH
from ..core.enums import Gender
from ..core.exceptions import ConflictError, NotFoundError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Owner-scoped student directory."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def _require_owned(self, owner_id: int, student_id: int) -> Student:
        student = self._students.get_for_owner(int(owner_id), int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def _ensure_unique(self, owner_id: int, *, email: str, phone_number: str, exclude_id: Optional[int] = None) -> None:
        same_email = self._students.get_by_email(owner_id, email)
        if same_email and same_email.student_id != exclude_id:
            raise ConflictError("Email already exists")
        same_phone = self._students.get_by_phone(owner_id, phone_number)
        if same_phone and same_phone.student_id != exclude_id:
            raise ConflictError("Phone number already exists")

    def list_students(
        self,
        *,
        owner_id: int,
        page: PageRequest,
        search: str = "",
        is_active: Optional[bool] = None,
    ) -> Page[Student]:
        items, total = self._students.list_page(
            int(owner_id), page, search=(search or "").strip(), is_active=is_active
        )
        return Page(items=items, total=total, request=page)

    def get_student(self, *, owner_id: int, student_id: int) -> Student:
        return self._require_owned(owner_id, student_id)

    def add_student(self, *, owner_id: int, full_name: str, email: str, phone_number: str, gender: str) -> Student:
        full_name = require_min_length(require_non_empty(full_name, "Full name"), "Full name", MIN_FULL_NAME_LENGTH)
        email = require_email(email)
        phone_number = require_ten_digits(phone_number, "Phone number")
        gender_v = require_choice(require_non_empty(gender, "Gender"), Gender, "Gender")

        self._ensure_unique(owner_id, email=email, phone_number=phone_number)

        student_id = self._students.create(
            owner_id=int(owner_id),
            full_name=full_name,
            email=email,
            phone_number=phone_number,
            gender=gender_v,
        )
        logger.info("Operator %s added student %s", owner_id, student_id)
        return self._require_owned(owner_id, student_id)

    def update_student(
        self,
        *,
        owner_id: int,
        student_id: int,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
        gender: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Student:
        current = self._require_owned(owner_id, student_id)

        new_name = current.full_name
        if full_name:
            new_name = require_min_length(full_name.strip(), "Full name", MIN_FULL_NAME_LENGTH)
        new_email = require_email(email) if email else current.email
        new_phone = require_ten_digits(phone_number, "Phone number") if phone_number else current.phone_number
        new_gender = require_choice(gender, Gender, "Gender") if gender else current.gender

        self._ensure_unique(owner_id, email=new_email, phone_number=new_phone, exclude_id=current.student_id)

        self._students.update(
            owner_id=int(owner_id),
            student_id=current.student_id,
            full_name=new_name,
            email=new_email,
            phone_number=new_phone,
            gender=new_gender,
        )
        if is_active is not None and is_active != current.is_active:
            self._students.set_active(int(owner_id), current.student_id, is_active=is_active)

        return self._require_owned(owner_id, student_id)

    def set_active(self, *, owner_id: int, student_id: int, is_active: bool) -> Student:
        current = self._require_owned(owner_id, student_id)
        if current.is_active != is_active:
            self._students.set_active(int(owner_id), current.student_id, is_active=is_active)
        return self._require_owned(owner_id, student_id)

    def delete_student(self, *, owner_id: int, student_id: int) -> None:
        if not self._students.delete(int(owner_id), int(student_id)):
            raise NotFoundError("Student not found")
        logger.info("Operator %s deleted student %s", owner_id, student_id)
