from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    """Domain entity: one notification row.

    ``period_key``/``overdue_count`` are only set for overdue_payment rows,
    which are unique per (owner, period). ``version`` increases on every write
    and is the compare-and-swap token for concurrent updates.
    """

    notification_id: int
    owner_id: int
    title: str
    message: str
    type: NotificationType
    student_ids: tuple[int, ...] = field(default_factory=tuple)
    student_names: tuple[str, ...] = field(default_factory=tuple)
    is_read: bool = False
    period_key: Optional[str] = None
    overdue_count: Optional[int] = None
    version: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "title": self.title,
            "message": self.message,
            "type": self.type.value,
            "studentIds": list(self.student_ids),
            "studentNames": list(self.student_names),
            "isRead": self.is_read,
            "periodKey": self.period_key,
            "overdueCount": self.overdue_count,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
