from __future__ import annotations

from datetime import date
from typing import Optional, Sequence, Tuple

from ..common.pagination import PageRequest
from ..core.enums import MealType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_list, fetchall, fetchone, load_json_list
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "attendance_id, owner_id, student_id, student_ids, attendance_date, "
    "is_present, is_batch, meal_type, created_at"
)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        owner_id=int(r["owner_id"]),
        attendance_date=r["attendance_date"],
        meal_type=MealType(r["meal_type"]),
        is_batch=bool(r["is_batch"]),
        is_present=bool(r["is_present"]),
        student_id=int(r["student_id"]) if r.get("student_id") is not None else None,
        student_ids=tuple(int(i) for i in load_json_list(r.get("student_ids"))),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_owner(self, owner_id: int, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE owner_id=%s AND attendance_id=%s",
                (int(owner_id), int(attendance_id)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_page(
        self,
        owner_id: int,
        page: PageRequest,
        *,
        attendance_date: Optional[date] = None,
        is_batch: Optional[bool] = None,
    ) -> Tuple[Sequence[AttendanceRecord], int]:
        clauses = ["owner_id=%s"]
        params: list[object] = [int(owner_id)]
        if attendance_date is not None:
            clauses.append("attendance_date=%s")
            params.append(attendance_date)
        if is_batch is not None:
            clauses.append("is_batch=%s")
            params.append(1 if is_batch else 0)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance WHERE {where}", tuple(params))
            total = int(fetchone(cur)["total"])

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE {where}
                ORDER BY attendance_date DESC, created_at DESC, attendance_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, page.limit, page.offset),
            )
            return [_to_record(r) for r in fetchall(cur)], total

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(owner_id, student_id, student_ids, attendance_date, is_present, is_batch, meal_type)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(owner_id),
                    int(student_id) if student_id is not None else None,
                    dump_json_list(student_ids),
                    attendance_date,
                    1 if is_present else 0,
                    1 if is_batch else 0,
                    meal_type.value,
                ),
            )
            return int(cur.lastrowid)

    def update(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET student_ids=%s, attendance_date=%s, is_present=%s, meal_type=%s
                WHERE owner_id=%s AND attendance_id=%s
                """,
                (
                    dump_json_list(record.student_ids),
                    record.attendance_date,
                    1 if record.is_present else 0,
                    record.meal_type.value,
                    int(record.owner_id),
                    int(record.attendance_id),
                ),
            )
            # rowcount is 0 when nothing changed; callers check existence first.
            return True

    def delete(self, owner_id: int, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance WHERE owner_id=%s AND attendance_id=%s",
                (int(owner_id), int(attendance_id)),
            )
            return cur.rowcount > 0
