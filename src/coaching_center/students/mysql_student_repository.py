from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from ..common.pagination import PageRequest
from ..core.enums import Gender
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, owner_id, full_name, email, phone_number, gender, is_active, created_at"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        owner_id=int(r["owner_id"]),
        full_name=r["full_name"],
        email=r["email"],
        phone_number=r["phone_number"],
        gender=Gender(r["gender"]),
        is_active=bool(r["is_active"]),
        created_at=r.get("created_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_active_by_owner(self, owner_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM students
                WHERE owner_id=%s AND is_active=1
                ORDER BY created_at ASC, student_id ASC
                """,
                (int(owner_id),),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def get_names_by_ids(self, owner_id: int, student_ids: Sequence[int]) -> Dict[int, str]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT student_id, full_name FROM students WHERE owner_id=%s AND student_id IN ({in_clause(ids)})",
                (int(owner_id), *ids),
            )
            return {int(r["student_id"]): r["full_name"] for r in fetchall(cur)}

    def get_for_owner(self, owner_id: int, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE owner_id=%s AND student_id=%s",
                (int(owner_id), int(student_id)),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_email(self, owner_id: int, email: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE owner_id=%s AND email=%s",
                (int(owner_id), email),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_phone(self, owner_id: int, phone_number: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE owner_id=%s AND phone_number=%s",
                (int(owner_id), phone_number),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def list_page(
        self,
        owner_id: int,
        page: PageRequest,
        *,
        search: str = "",
        is_active: Optional[bool] = None,
    ) -> Tuple[Sequence[Student], int]:
        clauses = ["owner_id=%s"]
        params: list[object] = [int(owner_id)]

        if is_active is not None:
            clauses.append("is_active=%s")
            params.append(1 if is_active else 0)
        if search:
            like = f"%{search}%"
            clauses.append("(full_name LIKE %s OR email LIKE %s OR phone_number LIKE %s)")
            params.extend([like, like, like])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM students WHERE {where}", tuple(params))
            total = int(fetchone(cur)["total"])

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM students
                WHERE {where}
                ORDER BY created_at DESC, student_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, page.limit, page.offset),
            )
            return [_to_student(r) for r in fetchall(cur)], total

    def create(
        self,
        *,
        owner_id: int,
        full_name: str,
        email: str,
        phone_number: str,
        gender: Gender,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(owner_id, full_name, email, phone_number, gender)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(owner_id), full_name, email, phone_number, gender.value),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET full_name=%s, email=%s, phone_number=%s, gender=%s
                WHERE owner_id=%s AND student_id=%s
                """,
                (full_name, email, phone_number, gender.value, int(owner_id), int(student_id)),
            )
            return cur.rowcount > 0

    def set_active(self, owner_id: int, student_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET is_active=%s WHERE owner_id=%s AND student_id=%s",
                (1 if is_active else 0, int(owner_id), int(student_id)),
            )
            return cur.rowcount > 0

    def delete(self, owner_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM students WHERE owner_id=%s AND student_id=%s",
                (int(owner_id), int(student_id)),
            )
            return cur.rowcount > 0
