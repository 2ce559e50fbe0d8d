from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence, Set, Tuple

from ..common.pagination import PageRequest
from ..core.enums import PaymentMode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Payment
from .repository import PaymentRepository

_SELECT = """
    SELECT
        b.payment_id, b.owner_id, b.student_id, b.payment_date, b.payment_time,
        b.payment_mode, b.utr_number, b.payment_month, b.amount, b.is_active, b.created_at,
        s.full_name AS student_name
    FROM billing b
    LEFT JOIN students s ON s.student_id = b.student_id
"""


def _to_payment(r: dict) -> Payment:
    return Payment(
        payment_id=int(r["payment_id"]),
        owner_id=int(r["owner_id"]),
        student_id=int(r["student_id"]),
        payment_date=r["payment_date"],
        payment_time=str(r["payment_time"]),
        payment_mode=PaymentMode(r["payment_mode"]),
        payment_month=r["payment_month"],
        amount=Decimal(str(r["amount"])),
        utr_number=r.get("utr_number"),
        is_active=bool(r["is_active"]),
        student_name=r.get("student_name"),
        created_at=r.get("created_at"),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_owner(self, owner_id: int, payment_id: int) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE b.owner_id=%s AND b.payment_id=%s",
                (int(owner_id), int(payment_id)),
            )
            r = fetchone(cur)
            return _to_payment(r) if r else None

    def list_page(
        self,
        owner_id: int,
        page: PageRequest,
        *,
        student_id: Optional[int] = None,
        payment_month: Optional[str] = None,
        payment_mode: Optional[PaymentMode] = None,
    ) -> Tuple[Sequence[Payment], int]:
        clauses = ["b.owner_id=%s"]
        params: list[object] = [int(owner_id)]
        if student_id is not None:
            clauses.append("b.student_id=%s")
            params.append(int(student_id))
        if payment_month:
            clauses.append("b.payment_month=%s")
            params.append(payment_month)
        if payment_mode is not None:
            clauses.append("b.payment_mode=%s")
            params.append(payment_mode.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM billing b WHERE {where}", tuple(params))
            total = int(fetchone(cur)["total"])

            cur.execute(
                f"""
                {_SELECT}
                WHERE {where}
                ORDER BY b.payment_date DESC, b.created_at DESC, b.payment_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, page.limit, page.offset),
            )
            return [_to_payment(r) for r in fetchall(cur)], total

    def find_paid_student_ids(self, owner_id: int, period: str, student_ids: Sequence[int]) -> Set[int]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return set()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT DISTINCT student_id
                FROM billing
                WHERE owner_id=%s AND payment_month=%s AND student_id IN ({in_clause(ids)})
                """,
                (int(owner_id), period, *ids),
            )
            return {int(r["student_id"]) for r in fetchall(cur)}

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO billing(
                    owner_id, student_id, payment_date, payment_time, payment_mode,
                    utr_number, payment_month, amount
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(owner_id),
                    int(student_id),
                    payment_date,
                    payment_time,
                    payment_mode.value,
                    utr_number,
                    payment_month,
                    amount,
                ),
            )
            return int(cur.lastrowid)

    def update(self, payment: Payment) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE billing
                SET payment_date=%s, payment_time=%s, payment_mode=%s, utr_number=%s,
                    payment_month=%s, amount=%s
                WHERE owner_id=%s AND payment_id=%s
                """,
                (
                    payment.payment_date,
                    payment.payment_time,
                    payment.payment_mode.value,
                    payment.utr_number,
                    payment.payment_month,
                    payment.amount,
                    payment.owner_id,
                    payment.payment_id,
                ),
            )
            # rowcount is 0 when nothing changed; existence is checked by the service.
            return True

    def delete(self, owner_id: int, payment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM billing WHERE owner_id=%s AND payment_id=%s",
                (int(owner_id), int(payment_id)),
            )
            return cur.rowcount > 0

    def set_active_for_student(self, owner_id: int, student_id: int, *, is_active: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE billing SET is_active=%s WHERE owner_id=%s AND student_id=%s",
                (1 if is_active else 0, int(owner_id), int(student_id)),
            )
            return int(cur.rowcount)
