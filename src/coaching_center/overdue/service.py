from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from ..billing.repository import PaymentRepository
from ..common.datetime_utils import now_local, period_key
from ..core.constants import MAX_SYNC_ATTEMPTS, OVERDUE_NOTIFICATION_TITLE, OVERDUE_START_DAY
from ..notifications.repository import NotificationRepository
from ..students.repository import StudentRepository
from .messages import format_overdue_message, same_members
from .model import OverdueStudent

logger = logging.getLogger(__name__)


class OverdueReconciliationService:
    """Keeps the single overdue_payment notification of a period in sync.

    Two entry points share the notification row:

    - ``recompute_and_sync`` rebuilds the overdue set from the student
      directory and the billing ledger (read path, errors propagate).
    - ``remove_from_overdue`` drops one student after a payment write
      (side effect of the write, errors are logged and swallowed).

    Every write is conditional on the row ``version`` read just before it; a
    stale write re-reads and retries up to ``max_attempts`` times.
    """

    def __init__(
        self,
        students: StudentRepository,
        payments: PaymentRepository,
        notifications: NotificationRepository,
        *,
        start_day: int = OVERDUE_START_DAY,
        max_attempts: int = MAX_SYNC_ATTEMPTS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._students = students
        self._payments = payments
        self._notifications = notifications
        self._start_day = int(start_day)
        self._max_attempts = max(1, int(max_attempts))
        self._clock = clock

    def recompute_and_sync(self, owner_id: int, now: Optional[datetime] = None) -> List[OverdueStudent]:
        now = now or self._clock()
        if now.day < self._start_day:
            return []

        owner_id = int(owner_id)
        period = period_key(now)

        active = self._students.find_active_by_owner(owner_id)
        paid = self._payments.find_paid_student_ids(owner_id, period, [s.student_id for s in active])
        overdue = [
            OverdueStudent(student_id=s.student_id, student_name=s.full_name)
            for s in active
            if s.student_id not in paid
        ]

        if not overdue:
            if self._notifications.delete_overdue(owner_id, period):
                logger.info("Cleared overdue notification for operator %s, period %s", owner_id, period)
            return []

        self._sync(owner_id, period, overdue)
        return overdue

    def _sync(self, owner_id: int, period: str, overdue: Sequence[OverdueStudent]) -> None:
        student_ids = [o.student_id for o in overdue]
        student_names = [o.student_name for o in overdue]
        message = format_overdue_message(len(student_ids), period)

        for attempt in range(1, self._max_attempts + 1):
            existing = self._notifications.find_overdue(owner_id, period)

            if existing is None:
                created_id = self._notifications.create_overdue(
                    owner_id=owner_id,
                    period=period,
                    title=OVERDUE_NOTIFICATION_TITLE,
                    message=message,
                    student_ids=student_ids,
                    student_names=student_names,
                )
                if created_id is not None:
                    logger.info(
                        "Created overdue notification %s for operator %s, period %s (%d students)",
                        created_id, owner_id, period, len(student_ids),
                    )
                    return
            elif same_members(existing.student_ids, student_ids):
                return
            elif self._notifications.replace_overdue(
                notification_id=existing.notification_id,
                expected_version=existing.version,
                message=message,
                student_ids=student_ids,
                student_names=student_names,
            ):
                logger.info(
                    "Updated overdue notification %s for operator %s, period %s (%d students)",
                    existing.notification_id, owner_id, period, len(student_ids),
                )
                return

            logger.warning(
                "Overdue notification for operator %s, period %s changed concurrently (attempt %d/%d)",
                owner_id, period, attempt, self._max_attempts,
            )

        logger.warning("Gave up syncing overdue notification for operator %s, period %s", owner_id, period)

    def remove_from_overdue(self, owner_id: int, student_id: int, period: str) -> None:
        try:
            self._remove(int(owner_id), int(student_id), period)
        except Exception:
            logger.exception(
                "Error removing student %s from overdue notification for operator %s, period %s",
                student_id, owner_id, period,
            )

    def _remove(self, owner_id: int, student_id: int, period: str) -> None:
        for attempt in range(1, self._max_attempts + 1):
            existing = self._notifications.find_overdue(owner_id, period)
            if existing is None or student_id not in existing.student_ids:
                return

            remaining = [i for i in existing.student_ids if i != student_id]
            names_by_id = self._students.get_names_by_ids(owner_id, remaining) if remaining else {}
            # Ids whose student row is gone cannot keep a name, so they leave too.
            remaining = [i for i in remaining if i in names_by_id]

            if not remaining:
                if self._notifications.delete_overdue_version(
                    notification_id=existing.notification_id,
                    expected_version=existing.version,
                ):
                    logger.info(
                        "Deleted overdue notification %s for operator %s, period %s: all paid",
                        existing.notification_id, owner_id, period,
                    )
                    return
            elif self._notifications.replace_overdue(
                notification_id=existing.notification_id,
                expected_version=existing.version,
                message=format_overdue_message(len(remaining), period),
                student_ids=remaining,
                student_names=[names_by_id[i] for i in remaining],
            ):
                logger.info(
                    "Removed student %s from overdue notification %s (%d left)",
                    student_id, existing.notification_id, len(remaining),
                )
                return

            logger.warning(
                "Overdue notification %s changed concurrently (attempt %d/%d)",
                existing.notification_id, attempt, self._max_attempts,
            )

        logger.warning(
            "Gave up removing student %s from overdue notification for operator %s, period %s",
            student_id, owner_id, period,
        )
