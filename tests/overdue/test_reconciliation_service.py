from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

import pytest

from coaching_center.core.enums import NotificationType
from coaching_center.overdue.model import OverdueStudent
from coaching_center.overdue.service import OverdueReconciliationService
from tests.fakes import FakeNotificationsRepo, FakePaymentsRepo, FakeStudentsRepo

OWNER = 7
OTHER_OWNER = 8
MID_JUNE = datetime(2025, 6, 15, 9, 30)


def _build():
    students = FakeStudentsRepo()
    payments = FakePaymentsRepo(students)
    notifications = FakeNotificationsRepo()
    svc = OverdueReconciliationService(students, payments, notifications)
    return svc, students, payments, notifications


def _assert_aligned(notification, students):
    assert len(notification.student_ids) == len(notification.student_names)
    for sid, name in zip(notification.student_ids, notification.student_names):
        assert students.rows[sid].full_name == name


def test_creates_notification_for_unpaid_active_students():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    c = students.add(OWNER, "Chen")

    overdue = svc.recompute_and_sync(OWNER, MID_JUNE)

    assert overdue == [
        OverdueStudent(a, "Asha"),
        OverdueStudent(b, "Bilal"),
        OverdueStudent(c, "Chen"),
    ]
    n = notifications.find_overdue(OWNER, "2025-06")
    assert n.type == NotificationType.OVERDUE_PAYMENT
    assert n.title == "Overdue Payments"
    assert n.student_ids == (a, b, c)
    assert n.message == "3 students have overdue payments for 2025-06"
    assert n.overdue_count == 3
    assert n.is_read is False
    _assert_aligned(n, students)


def test_grace_window_returns_empty_without_touching_store():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    notifications.create_overdue(
        owner_id=OWNER,
        period="2025-06",
        title="Overdue Payments",
        message="1 student have overdue payments for 2025-06",
        student_ids=[a],
        student_names=["Asha"],
    )
    notifications.writes.clear()

    for day in range(1, 11):
        assert svc.recompute_and_sync(OWNER, datetime(2025, 6, day, 23, 59)) == []

    assert notifications.writes == []
    assert notifications.find_overdue(OWNER, "2025-06") is not None


def test_day_eleven_is_first_overdue_day():
    svc, students, _, _ = _build()
    students.add(OWNER, "Asha")

    assert svc.recompute_and_sync(OWNER, datetime(2025, 6, 10, 23, 59)) == []
    assert len(svc.recompute_and_sync(OWNER, datetime(2025, 6, 11, 0, 0))) == 1


def test_recompute_is_idempotent_and_keeps_read_flag():
    svc, students, _, notifications = _build()
    students.add(OWNER, "Asha")
    students.add(OWNER, "Bilal")

    svc.recompute_and_sync(OWNER, MID_JUNE)
    n = notifications.find_overdue(OWNER, "2025-06")
    notifications.mark_read(OWNER, n.notification_id)
    notifications.writes.clear()

    svc.recompute_and_sync(OWNER, MID_JUNE)

    assert notifications.writes == []
    assert notifications.find_overdue(OWNER, "2025-06").is_read is True


def test_same_members_in_other_order_is_not_a_change():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    notifications.create_overdue(
        owner_id=OWNER,
        period="2025-06",
        title="Overdue Payments",
        message="2 students have overdue payments for 2025-06",
        student_ids=[b, a],
        student_names=["Bilal", "Asha"],
    )
    notifications.writes.clear()

    overdue = svc.recompute_and_sync(OWNER, MID_JUNE)

    assert [o.student_id for o in overdue] == [a, b]
    assert notifications.writes == []


def test_changed_set_overwrites_and_marks_unread():
    svc, students, payments, notifications = _build()
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    svc.recompute_and_sync(OWNER, MID_JUNE)
    n = notifications.find_overdue(OWNER, "2025-06")
    notifications.mark_read(OWNER, n.notification_id)

    payments.add(OWNER, a, "2025-06")
    overdue = svc.recompute_and_sync(OWNER, MID_JUNE)

    assert overdue == [OverdueStudent(b, "Bilal")]
    n = notifications.find_overdue(OWNER, "2025-06")
    assert n.student_ids == (b,)
    assert n.student_names == ("Bilal",)
    assert n.message == "1 student have overdue payments for 2025-06"
    assert n.overdue_count == 1
    assert n.is_read is False
    assert len(notifications.overdue_rows(OWNER)) == 1


def test_everyone_paid_deletes_notification():
    svc, students, payments, notifications = _build()
    a = students.add(OWNER, "Asha")
    svc.recompute_and_sync(OWNER, MID_JUNE)

    payments.add(OWNER, a, "2025-06")

    assert svc.recompute_and_sync(OWNER, MID_JUNE) == []
    assert notifications.find_overdue(OWNER, "2025-06") is None


def test_duplicate_payments_count_as_paid_once():
    svc, students, payments, _ = _build()
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    payments.add(OWNER, a, "2025-06")
    payments.add(OWNER, a, "2025-06")

    assert svc.recompute_and_sync(OWNER, MID_JUNE) == [OverdueStudent(b, "Bilal")]


def test_ignores_inactive_students_other_operators_and_other_periods():
    svc, students, payments, notifications = _build()
    a = students.add(OWNER, "Asha")
    students.add(OWNER, "Dormant", is_active=False)
    other = students.add(OTHER_OWNER, "Elsewhere")
    payments.add(OWNER, a, "2025-05")

    overdue = svc.recompute_and_sync(OWNER, MID_JUNE)

    assert overdue == [OverdueStudent(a, "Asha")]
    assert notifications.overdue_rows(OTHER_OWNER) == []
    assert other not in notifications.find_overdue(OWNER, "2025-06").student_ids


def test_recompute_propagates_store_faults():
    svc, students, _, notifications = _build()
    students.add(OWNER, "Asha")
    notifications.fail_with = ConnectionError("store unavailable")

    with pytest.raises(ConnectionError):
        svc.recompute_and_sync(OWNER, MID_JUNE)


def test_remove_is_noop_without_notification():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")

    svc.remove_from_overdue(OWNER, a, "2025-06")

    assert notifications.writes == []


def test_remove_is_noop_when_student_not_listed():
    svc, students, payments, notifications = _build()
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    payments.add(OWNER, b, "2025-06")
    svc.recompute_and_sync(OWNER, MID_JUNE)
    notifications.writes.clear()

    svc.remove_from_overdue(OWNER, b, "2025-06")

    assert notifications.writes == []
    assert notifications.find_overdue(OWNER, "2025-06").student_ids == (a,)


def test_remove_rebuilds_names_from_directory():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    c = students.add(OWNER, "Chen")
    # Stored names are stale; the remove path must not trust them.
    notifications.create_overdue(
        owner_id=OWNER,
        period="2025-06",
        title="Overdue Payments",
        message="3 students have overdue payments for 2025-06",
        student_ids=[c, a, b],
        student_names=["x", "y", "z"],
    )

    svc.remove_from_overdue(OWNER, a, "2025-06")

    n = notifications.find_overdue(OWNER, "2025-06")
    assert n.student_ids == (c, b)
    assert n.student_names == ("Chen", "Bilal")
    assert n.message == "2 students have overdue payments for 2025-06"
    assert n.overdue_count == 2
    _assert_aligned(n, students)


def test_remove_drops_ids_of_deleted_students():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    c = students.add(OWNER, "Chen")
    svc.recompute_and_sync(OWNER, MID_JUNE)
    students.delete(OWNER, c)

    svc.remove_from_overdue(OWNER, a, "2025-06")

    n = notifications.find_overdue(OWNER, "2025-06")
    assert n.student_ids == (b,)
    _assert_aligned(n, students)


def test_remove_last_student_deletes_notification():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    svc.recompute_and_sync(OWNER, MID_JUNE)

    svc.remove_from_overdue(OWNER, a, "2025-06")

    assert notifications.find_overdue(OWNER, "2025-06") is None


def test_remove_only_touches_its_own_period():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    svc.recompute_and_sync(OWNER, MID_JUNE)

    svc.remove_from_overdue(OWNER, a, "2025-05")

    assert notifications.find_overdue(OWNER, "2025-06").student_ids == (a,)


def test_remove_swallows_and_logs_store_faults(caplog, monkeypatch):
    monkeypatch.setattr(logging.getLogger("coaching_center"), "propagate", True)
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    notifications.fail_with = ConnectionError("store unavailable")

    with caplog.at_level(logging.ERROR, logger="coaching_center.overdue.service"):
        svc.remove_from_overdue(OWNER, a, "2025-06")

    assert any("Error removing student" in r.getMessage() for r in caplog.records)


class RacingNotificationsRepo(FakeNotificationsRepo):
    """Simulates another writer bumping the row right after each read."""

    def __init__(self, races: int):
        super().__init__()
        self.races = races

    def find_overdue(self, owner_id, period):
        found = super().find_overdue(owner_id, period)
        if found is not None and self.races > 0:
            self.races -= 1
            current = self.rows[found.notification_id]
            self.rows[found.notification_id] = replace(current, is_read=True, version=current.version + 1)
        return found


def test_remove_retries_after_concurrent_write():
    students = FakeStudentsRepo()
    notifications = RacingNotificationsRepo(races=0)
    svc = OverdueReconciliationService(students, FakePaymentsRepo(students), notifications)
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    svc.recompute_and_sync(OWNER, MID_JUNE)

    notifications.races = 1
    svc.remove_from_overdue(OWNER, a, "2025-06")

    n = notifications.find_overdue(OWNER, "2025-06")
    assert n.student_ids == (b,)
    assert n.is_read is False


def test_recompute_retries_after_concurrent_write():
    students = FakeStudentsRepo()
    payments = FakePaymentsRepo(students)
    notifications = RacingNotificationsRepo(races=0)
    svc = OverdueReconciliationService(students, payments, notifications)
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    svc.recompute_and_sync(OWNER, MID_JUNE)
    payments.add(OWNER, a, "2025-06")

    notifications.races = 2
    svc.recompute_and_sync(OWNER, MID_JUNE)

    assert notifications.find_overdue(OWNER, "2025-06").student_ids == (b,)


def test_set_converges_after_mixed_operations():
    svc, students, payments, notifications = _build()
    ids = [students.add(OWNER, name) for name in ("Asha", "Bilal", "Chen", "Dev", "Esi")]
    svc.recompute_and_sync(OWNER, MID_JUNE)

    p1 = payments.add(OWNER, ids[0], "2025-06")
    svc.remove_from_overdue(OWNER, ids[0], "2025-06")
    payments.add(OWNER, ids[3], "2025-06")
    svc.remove_from_overdue(OWNER, ids[3], "2025-06")
    svc.recompute_and_sync(OWNER, MID_JUNE)
    payments.delete(OWNER, p1)
    students.set_active(OWNER, ids[4], is_active=False)
    payments.add(OWNER, ids[1], "2025-05")

    svc.recompute_and_sync(OWNER, MID_JUNE)

    n = notifications.find_overdue(OWNER, "2025-06")
    assert set(n.student_ids) == {ids[0], ids[1], ids[2]}
    _assert_aligned(n, students)
