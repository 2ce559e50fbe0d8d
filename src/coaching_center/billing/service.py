from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.pagination import Page, PageRequest
from ..common.validators import require_amount, require_choice, require_non_empty, require_period
from ..core.constants import UNSET
from ..core.enums import PaymentMode
from ..core.exceptions import NotFoundError, ValidationError
from ..overdue.model import OverdueStudent
from ..overdue.service import OverdueReconciliationService
from ..students.repository import StudentRepository
from .model import Payment
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


class BillingService:
    def __init__(
        self,
        payments: PaymentRepository,
        students: StudentRepository,
        reconciler: OverdueReconciliationService,
    ):
        self._payments = payments
        self._students = students
        self._reconciler = reconciler

    @staticmethod
    def _parse_date(value):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return parse_iso_date(str(value)[:10])
        except ValueError:
            raise ValidationError("Payment date must use the YYYY-MM-DD format")

    @staticmethod
    def _utr_for(mode: PaymentMode, utr_number: Optional[str]) -> Optional[str]:
        if mode != PaymentMode.ONLINE:
            return None
        return (utr_number or "").strip() or None

    def _require_student(self, owner_id: int, student_id) -> int:
        try:
            sid = int(student_id)
        except (TypeError, ValueError):
            raise NotFoundError("Student not found or unauthorized")
        if not self._students.get_for_owner(int(owner_id), sid):
            raise NotFoundError("Student not found or unauthorized")
        return sid

    def _after_payment_write(self, owner_id: int, student_id: int, period: str) -> None:
        # Runs after the write committed; never fails the write.
        self._reconciler.remove_from_overdue(owner_id, student_id, period)

    def list_payments(
        self,
        *,
        owner_id: int,
        page: PageRequest,
        student_id: Optional[int] = None,
        payment_month: Optional[str] = None,
        payment_mode: Optional[str] = None,
    ) -> Page[Payment]:
        mode = require_choice(payment_mode, PaymentMode, "Payment mode") if payment_mode else None
        items, total = self._payments.list_page(
            int(owner_id),
            page,
            student_id=int(student_id) if student_id is not None else None,
            payment_month=payment_month or None,
            payment_mode=mode,
        )
        return Page(items=items, total=total, request=page)

    def add_payment(
        self,
        *,
        owner_id: int,
        student_id,
        payment_date,
        payment_time: str,
        payment_mode: str,
        payment_month: str,
        amount,
        utr_number: Optional[str] = None,
    ) -> Payment:
        if not all([student_id, payment_date, payment_time, payment_mode, payment_month]) or amount in (None, ""):
            raise ValidationError("All required fields must be provided")

        owner_id = int(owner_id)
        sid = self._require_student(owner_id, student_id)
        mode = require_choice(payment_mode, PaymentMode, "Payment mode")
        period = require_period(payment_month)

        payment_id = self._payments.create(
            owner_id=owner_id,
            student_id=sid,
            payment_date=self._parse_date(payment_date),
            payment_time=require_non_empty(payment_time, "Payment time"),
            payment_mode=mode,
            utr_number=self._utr_for(mode, utr_number),
            payment_month=period,
            amount=Decimal(str(require_amount(amount, allow_zero=False))),
        )
        logger.info("Operator %s recorded payment %s for student %s (%s)", owner_id, payment_id, sid, period)

        self._after_payment_write(owner_id, sid, period)
        return self._payments.get_for_owner(owner_id, payment_id)

    def update_payment(
        self,
        *,
        owner_id: int,
        payment_id: int,
        payment_date=None,
        payment_time: Optional[str] = None,
        payment_mode: Optional[str] = None,
        payment_month: Optional[str] = None,
        amount=None,
        utr_number=UNSET,
    ) -> Payment:
        owner_id = int(owner_id)
        current = self._payments.get_for_owner(owner_id, int(payment_id))
        if not current:
            raise NotFoundError("Billing record not found or unauthorized")

        mode = require_choice(payment_mode, PaymentMode, "Payment mode") if payment_mode else current.payment_mode
        if utr_number is not UNSET:
            utr = self._utr_for(mode, utr_number)
        else:
            utr = current.utr_number if mode == PaymentMode.ONLINE else None

        updated = replace(
            current,
            payment_date=self._parse_date(payment_date) if payment_date else current.payment_date,
            payment_time=require_non_empty(payment_time, "Payment time") if payment_time else current.payment_time,
            payment_mode=mode,
            utr_number=utr,
            payment_month=require_period(payment_month) if payment_month else current.payment_month,
            amount=Decimal(str(require_amount(amount))) if amount not in (None, "") else current.amount,
        )
        self._payments.update(updated)
        logger.info("Operator %s updated payment %s", owner_id, current.payment_id)

        self._after_payment_write(owner_id, updated.student_id, updated.payment_month)
        return self._payments.get_for_owner(owner_id, current.payment_id)

    def delete_payment(self, *, owner_id: int, payment_id: int) -> None:
        if not self._payments.delete(int(owner_id), int(payment_id)):
            raise NotFoundError("Billing record not found or unauthorized")
        logger.info("Operator %s deleted payment %s", owner_id, payment_id)

    def toggle_billing_management(self, *, owner_id: int, student_id, is_active: bool) -> int:
        sid = self._require_student(int(owner_id), student_id)
        return self._payments.set_active_for_student(int(owner_id), sid, is_active=bool(is_active))

    def get_overdue_payments(self, *, owner_id: int, now: Optional[datetime] = None) -> List[OverdueStudent]:
        return self._reconciler.recompute_and_sync(int(owner_id), now)
