from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple

from ..common.pagination import PageRequest
from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def get_for_owner(self, owner_id: int, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_page(
        self,
        owner_id: int,
        page: PageRequest,
        *,
        is_read: Optional[bool] = None,
        type: Optional[NotificationType] = None,
    ) -> Tuple[Sequence[Notification], int]:
        raise NotImplementedError

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
        raise NotImplementedError

    def mark_read(self, owner_id: int, notification_id: int) -> bool:
        raise NotImplementedError

    def mark_all_read(self, owner_id: int) -> int:
        raise NotImplementedError

    def delete(self, owner_id: int, notification_id: int) -> bool:
        raise NotImplementedError

    def count_unread(self, owner_id: int) -> int:
        raise NotImplementedError

    # Keyed access to the single overdue_payment row per (owner, period).

    def find_overdue(self, owner_id: int, period: str) -> Optional[Notification]:
        raise NotImplementedError

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
        """Insert the overdue row; None when one already exists for the period."""

        raise NotImplementedError

    def replace_overdue(
        self,
        *,
        notification_id: int,
        expected_version: int,
        message: str,
        student_ids: Sequence[int],
        student_names: Sequence[str],
    ) -> bool:
        """Overwrite content and mark unread; False when ``expected_version`` is stale."""

        raise NotImplementedError

    def delete_overdue_version(self, *, notification_id: int, expected_version: int) -> bool:
        raise NotImplementedError

    def delete_overdue(self, owner_id: int, period: str) -> int:
        raise NotImplementedError
