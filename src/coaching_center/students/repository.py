from __future__ import annotations

from typing import Dict, Optional, Protocol, Sequence, Tuple

from ..common.pagination import PageRequest
from ..core.enums import Gender
from .model import Student


class StudentRepository(Protocol):
    def find_active_by_owner(self, owner_id: int) -> Sequence[Student]:
        """Active students of one operator, oldest first."""

        raise NotImplementedError

    def get_names_by_ids(self, owner_id: int, student_ids: Sequence[int]) -> Dict[int, str]:
        raise NotImplementedError

    def get_for_owner(self, owner_id: int, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_email(self, owner_id: int, email: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_phone(self, owner_id: int, phone_number: str) -> Optional[Student]:
        raise NotImplementedError

    def list_page(
        self,
        owner_id: int,
        page: PageRequest,
        *,
        search: str = "",
        is_active: Optional[bool] = None,
    ) -> Tuple[Sequence[Student], int]:
        raise NotImplementedError

    def create(
        self,
        *,
        owner_id: int,
        full_name: str,
        email: str,
        phone_number: str,
        gender: Gender,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        owner_id: int,
        student_id: int,
        full_name: str,
        email: str,
        phone_number: str,
        gender: Gender,
    ) -> bool:
        raise NotImplementedError

    def set_active(self, owner_id: int, student_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def delete(self, owner_id: int, student_id: int) -> bool:
        raise NotImplementedError
