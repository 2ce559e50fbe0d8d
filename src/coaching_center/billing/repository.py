from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence, Set, Tuple

from ..common.pagination import PageRequest
from ..core.enums import PaymentMode
from .model import Payment


class PaymentRepository(Protocol):
    def get_for_owner(self, owner_id: int, payment_id: int) -> Optional[Payment]:
        raise NotImplementedError

    def list_page(
        self,
        owner_id: int,
        page: PageRequest,
        *,
        student_id: Optional[int] = None,
        payment_month: Optional[str] = None,
        payment_mode: Optional[PaymentMode] = None,
    ) -> Tuple[Sequence[Payment], int]:
        raise NotImplementedError

    def find_paid_student_ids(self, owner_id: int, period: str, student_ids: Sequence[int]) -> Set[int]:
        """Distinct students with at least one payment row for ``period``."""

        raise NotImplementedError

    def create(
        self,
        *,
        owner_id: int,
        student_id: int,
        payment_date: date,
        payment_time: str,
        payment_mode: PaymentMode,
        utr_number: Optional[str],
        payment_month: str,
        amount: Decimal,
    ) -> int:
        raise NotImplementedError

    def update(self, payment: Payment) -> bool:
        raise NotImplementedError

    def delete(self, owner_id: int, payment_id: int) -> bool:
        raise NotImplementedError

    def set_active_for_student(self, owner_id: int, student_id: int, *, is_active: bool) -> int:
        raise NotImplementedError
