from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Operator
from .repository import OperatorRepository

_COLUMNS = "operator_id, full_name, email, mobile_number, password_hash, is_active, profile_image_path"


def _to_operator(r: dict) -> Operator:
    return Operator(
        operator_id=int(r["operator_id"]),
        full_name=r["full_name"],
        email=r["email"],
        mobile_number=r["mobile_number"],
        password_hash=r["password_hash"],
        is_active=bool(r["is_active"]),
        profile_image_path=r.get("profile_image_path"),
    )


class MySQLOperatorRepository(OperatorRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_by(self, column: str, value) -> Optional[Operator]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM operators WHERE {column}=%s", (value,))
            r = fetchone(cur)
            return _to_operator(r) if r else None

    def get_by_id(self, operator_id: int) -> Optional[Operator]:
        return self._get_by("operator_id", int(operator_id))

    def get_by_email(self, email: str) -> Optional[Operator]:
        return self._get_by("email", email)

    def get_by_mobile(self, mobile_number: str) -> Optional[Operator]:
        return self._get_by("mobile_number", mobile_number)

    def create(self, *, full_name: str, email: str, mobile_number: str, password_hash: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO operators(full_name, email, mobile_number, password_hash)
                VALUES(%s,%s,%s,%s)
                """,
                (full_name, email, mobile_number, password_hash),
            )
            return int(cur.lastrowid)

    def update_profile(self, operator_id: int, *, full_name: str, profile_image_path: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE operators SET full_name=%s, profile_image_path=%s WHERE operator_id=%s",
                (full_name, profile_image_path, int(operator_id)),
            )
            # rowcount is 0 when nothing changed; the service checks existence first.
            return True
