from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PaymentMode


@dataclass(frozen=True)
class Payment:
    """Domain entity: one billing row (a payment by a student for a month)."""

    payment_id: int
    owner_id: int
    student_id: int
    payment_date: date
    payment_time: str
    payment_mode: PaymentMode
    payment_month: str
    amount: Decimal
    utr_number: Optional[str] = None
    is_active: bool = True
    student_name: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.payment_id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "paymentDate": self.payment_date.isoformat(),
            "paymentTime": self.payment_time,
            "paymentMode": self.payment_mode.value,
            "utrNumber": self.utr_number,
            "paymentMonth": self.payment_month,
            "amount": float(self.amount),
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

