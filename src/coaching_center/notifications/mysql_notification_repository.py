from __future__ import annotations

from typing import Optional, Sequence, Tuple

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..common.pagination import PageRequest
from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_list, fetchall, fetchone, load_json_list
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = (
    "notification_id, owner_id, title, message, type, student_ids, student_names, "
    "is_read, period_key, overdue_count, version, created_at, updated_at"
)


def _to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        owner_id=int(r["owner_id"]),
        title=r["title"],
        message=r["message"],
        type=NotificationType(r["type"]),
        student_ids=tuple(int(i) for i in load_json_list(r.get("student_ids"))),
        student_names=tuple(str(n) for n in load_json_list(r.get("student_names"))),
        is_read=bool(r["is_read"]),
        period_key=r.get("period_key"),
        overdue_count=int(r["overdue_count"]) if r.get("overdue_count") is not None else None,
        version=int(r["version"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_owner(self, owner_id: int, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM notifications WHERE owner_id=%s AND notification_id=%s",
                (int(owner_id), int(notification_id)),
            )
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def list_page(
        self,
        owner_id: int,
        page: PageRequest,
        *,
        is_read: Optional[bool] = None,
        type: Optional[NotificationType] = None,
    ) -> Tuple[Sequence[Notification], int]:
        clauses = ["owner_id=%s"]
        params: list[object] = [int(owner_id)]
        if is_read is not None:
            clauses.append("is_read=%s")
            params.append(1 if is_read else 0)
        if type is not None:
            clauses.append("type=%s")
            params.append(type.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM notifications WHERE {where}", tuple(params))
            total = int(fetchone(cur)["total"])

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM notifications
                WHERE {where}
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, page.limit, page.offset),
            )
            return [_to_notification(r) for r in fetchall(cur)], total

    def create(
        self,
        *,
        owner_id: int,
        title: str,
        message: str,
        type: NotificationType,
        student_ids: Sequence[int] = (),
        student_names: Sequence[str] = (),
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(owner_id, title, message, type, student_ids, student_names)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(owner_id), title, message, type.value, dump_json_list(student_ids), dump_json_list(student_names)),
            )
            return int(cur.lastrowid)

    def mark_read(self, owner_id: int, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE notifications
                SET is_read=1, version=version+1
                WHERE owner_id=%s AND notification_id=%s
                """,
                (int(owner_id), int(notification_id)),
            )
            return cur.rowcount > 0

    def mark_all_read(self, owner_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1, version=version+1 WHERE owner_id=%s AND is_read=0",
                (int(owner_id),),
            )
            return int(cur.rowcount)

    def delete(self, owner_id: int, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM notifications WHERE owner_id=%s AND notification_id=%s",
                (int(owner_id), int(notification_id)),
            )
            return cur.rowcount > 0

    def count_unread(self, owner_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM notifications WHERE owner_id=%s AND is_read=0",
                (int(owner_id),),
            )
            return int(fetchone(cur)["total"])

    def find_overdue(self, owner_id: int, period: str) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM notifications
                WHERE owner_id=%s AND type=%s AND period_key=%s
                """,
                (int(owner_id), NotificationType.OVERDUE_PAYMENT.value, period),
            )
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def create_overdue(
        self,
        *,
        owner_id: int,
        period: str,
        title: str,
        message: str,
        student_ids: Sequence[int],
        student_names: Sequence[str],
    ) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO notifications(
                        owner_id, title, message, type, student_ids, student_names,
                        is_read, period_key, overdue_count
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,0,%s,%s)
                    """,
                    (
                        int(owner_id),
                        title,
                        message,
                        NotificationType.OVERDUE_PAYMENT.value,
                        dump_json_list(student_ids),
                        dump_json_list(student_names),
                        period,
                        len(student_ids),
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            # uq_notifications_owner_type_period: another request created it first.
            if e.errno == errorcode.ER_DUP_ENTRY:
                return None
            raise

    def replace_overdue(
        self,
        *,
        notification_id: int,
        expected_version: int,
        message: str,
        student_ids: Sequence[int],
        student_names: Sequence[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE notifications
                SET student_ids=%s, student_names=%s, message=%s, overdue_count=%s,
                    is_read=0, version=version+1
                WHERE notification_id=%s AND version=%s
                """,
                (
                    dump_json_list(student_ids),
                    dump_json_list(student_names),
                    message,
                    len(student_ids),
                    int(notification_id),
                    int(expected_version),
                ),
            )
            return cur.rowcount > 0

    def delete_overdue_version(self, *, notification_id: int, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM notifications WHERE notification_id=%s AND version=%s",
                (int(notification_id), int(expected_version)),
            )
            return cur.rowcount > 0

    def delete_overdue(self, owner_id: int, period: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM notifications WHERE owner_id=%s AND type=%s AND period_key=%s",
                (int(owner_id), NotificationType.OVERDUE_PAYMENT.value, period),
            )
            return int(cur.rowcount)
