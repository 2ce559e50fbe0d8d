from __future__ import annotations

from typing import Optional, Sequence

from ..common.pagination import Page, PageRequest
from ..common.validators import require_choice, require_non_empty
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from .model import Notification
from .repository import NotificationRepository


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def list_notifications(
        self,
        *,
        owner_id: int,
        page: PageRequest,
        is_read: Optional[bool] = None,
        type: Optional[str] = None,
    ) -> Page[Notification]:
        type_v = require_choice(type, NotificationType, "Type") if type else None
        items, total = self._notifications.list_page(int(owner_id), page, is_read=is_read, type=type_v)
        return Page(items=items, total=total, request=page)

    def create_notification(
        self,
        *,
        owner_id: int,
        title: str,
        message: str,
        type: Optional[str] = None,
        student_ids: Sequence[int] = (),
        student_names: Sequence[str] = (),
    ) -> Notification:
        title = require_non_empty(title, "Title")
        message = require_non_empty(message, "Message")
        type_v = require_choice(type, NotificationType, "Type") if type else NotificationType.OTHER
        if type_v == NotificationType.OVERDUE_PAYMENT:
            # Overdue rows are owned by the reconciliation workflow.
            raise ValidationError("Overdue payment notifications are generated automatically")
        if not isinstance(student_ids, (list, tuple)) or not isinstance(student_names, (list, tuple)):
            raise ValidationError("studentIds and studentNames must be lists")
        if len(student_ids) != len(student_names):
            raise ValidationError("studentIds and studentNames must have the same length")
        try:
            ids = [int(i) for i in student_ids]
        except (TypeError, ValueError):
            raise ValidationError("studentIds must contain numeric ids")

        notification_id = self._notifications.create(
            owner_id=int(owner_id),
            title=title,
            message=message,
            type=type_v,
            student_ids=ids,
            student_names=[str(n) for n in student_names],
        )
        return self._notifications.get_for_owner(int(owner_id), notification_id)

    def mark_as_read(self, *, owner_id: int, notification_id: int) -> Notification:
        if not self._notifications.mark_read(int(owner_id), int(notification_id)):
            raise NotFoundError("Notification not found")
        return self._notifications.get_for_owner(int(owner_id), int(notification_id))

    def mark_all_as_read(self, *, owner_id: int) -> int:
        return self._notifications.mark_all_read(int(owner_id))

    def delete_notification(self, *, owner_id: int, notification_id: int) -> None:
        if not self._notifications.delete(int(owner_id), int(notification_id)):
            raise NotFoundError("Notification not found")

    def unread_count(self, *, owner_id: int) -> int:
        return self._notifications.count_unread(int(owner_id))
