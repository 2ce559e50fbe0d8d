from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from coaching_center.billing.service import BillingService
from coaching_center.common.pagination import PageRequest
from coaching_center.core.enums import PaymentMode
from coaching_center.core.exceptions import NotFoundError, ValidationError
from coaching_center.overdue.model import OverdueStudent
from coaching_center.overdue.service import OverdueReconciliationService
from tests.fakes import FakeNotificationsRepo, FakePaymentsRepo, FakeStudentsRepo

OWNER = 3
JUNE_15 = datetime(2025, 6, 15, 10, 0)


def _build():
    students = FakeStudentsRepo()
    payments = FakePaymentsRepo(students)
    notifications = FakeNotificationsRepo()
    reconciler = OverdueReconciliationService(students, payments, notifications)
    return BillingService(payments, students, reconciler), students, payments, notifications


def _pay(svc, student_id, month="2025-06", **overrides):
    fields = dict(
        owner_id=OWNER,
        student_id=student_id,
        payment_date="2025-06-15",
        payment_time="10:30",
        payment_mode="Cash",
        payment_month=month,
        amount="500",
    )
    fields.update(overrides)
    return svc.add_payment(**fields)


def test_overdue_scenario_from_creation_to_deletion():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    c = students.add(OWNER, "Chen")

    overdue = svc.get_overdue_payments(owner_id=OWNER, now=JUNE_15)
    assert [o.student_id for o in overdue] == [a, b, c]
    assert notifications.find_overdue(OWNER, "2025-06").message == "3 students have overdue payments for 2025-06"

    n = notifications.find_overdue(OWNER, "2025-06")
    notifications.mark_read(OWNER, n.notification_id)

    _pay(svc, b)
    n = notifications.find_overdue(OWNER, "2025-06")
    assert n.student_ids == (a, c)
    assert n.student_names == ("Asha", "Chen")
    assert n.message == "2 students have overdue payments for 2025-06"
    assert n.is_read is False

    _pay(svc, a)
    _pay(svc, c)
    assert notifications.find_overdue(OWNER, "2025-06") is None
    assert svc.get_overdue_payments(owner_id=OWNER, now=JUNE_15) == []


def test_add_payment_for_other_period_leaves_notification_alone():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    svc.get_overdue_payments(owner_id=OWNER, now=JUNE_15)
    notifications.writes.clear()

    _pay(svc, a, month="2025-05")

    assert notifications.writes == []
    assert notifications.find_overdue(OWNER, "2025-06").student_ids == (a,)


def test_add_payment_survives_reconciliation_failure():
    svc, students, payments, notifications = _build()
    a = students.add(OWNER, "Asha")
    notifications.fail_with = RuntimeError("notification store down")

    payment = _pay(svc, a)

    assert payment.payment_id in payments.rows
    assert payment.amount == Decimal("500")


def test_add_payment_validates_input():
    svc, students, _, _ = _build()
    a = students.add(OWNER, "Asha")

    with pytest.raises(ValidationError):
        _pay(svc, a, payment_time="")
    with pytest.raises(ValidationError):
        _pay(svc, a, month="June 2025")
    with pytest.raises(ValidationError):
        _pay(svc, a, amount="-1")
    with pytest.raises(ValidationError):
        _pay(svc, a, payment_mode="Cheque")
    with pytest.raises(ValidationError):
        _pay(svc, a, payment_date="15/06/2025")


def test_add_payment_rejects_foreign_student():
    svc, students, _, _ = _build()
    foreign = students.add(OWNER + 1, "Zed")

    with pytest.raises(NotFoundError):
        _pay(svc, foreign)


def test_utr_is_kept_only_for_online_payments():
    svc, students, _, _ = _build()
    a = students.add(OWNER, "Asha")

    cash = _pay(svc, a, utr_number="UTR123")
    online = _pay(svc, a, payment_mode="Online", utr_number=" UTR456 ")

    assert cash.utr_number is None
    assert online.utr_number == "UTR456"
    assert online.payment_mode == PaymentMode.ONLINE
    assert online.payment_date == date(2025, 6, 15)


def test_update_payment_moving_into_period_removes_student():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    payment = _pay(svc, a, month="2025-05")
    svc.get_overdue_payments(owner_id=OWNER, now=JUNE_15)

    updated = svc.update_payment(owner_id=OWNER, payment_id=payment.payment_id, payment_month="2025-06")

    assert updated.payment_month == "2025-06"
    assert updated.amount == Decimal("500")
    assert notifications.find_overdue(OWNER, "2025-06").student_ids == (b,)


def test_update_payment_switching_away_from_online_clears_utr():
    svc, students, _, _ = _build()
    a = students.add(OWNER, "Asha")
    payment = _pay(svc, a, payment_mode="Online", utr_number="UTR1")

    kept = svc.update_payment(owner_id=OWNER, payment_id=payment.payment_id, amount="750")
    cleared = svc.update_payment(owner_id=OWNER, payment_id=payment.payment_id, payment_mode="Cash")

    assert kept.utr_number == "UTR1"
    assert kept.amount == Decimal("750")
    assert cleared.utr_number is None


def test_update_and_delete_unknown_payment_raise_not_found():
    svc, _, _, _ = _build()

    with pytest.raises(NotFoundError):
        svc.update_payment(owner_id=OWNER, payment_id=99, amount="1")
    with pytest.raises(NotFoundError):
        svc.delete_payment(owner_id=OWNER, payment_id=99)


def test_deleting_payment_puts_student_back_on_next_recompute():
    svc, students, _, notifications = _build()
    a = students.add(OWNER, "Asha")
    payment = _pay(svc, a)
    assert svc.get_overdue_payments(owner_id=OWNER, now=JUNE_15) == []

    svc.delete_payment(owner_id=OWNER, payment_id=payment.payment_id)

    assert svc.get_overdue_payments(owner_id=OWNER, now=JUNE_15) == [OverdueStudent(a, "Asha")]
    assert notifications.find_overdue(OWNER, "2025-06").student_ids == (a,)


def test_list_payments_filters_and_paginates():
    svc, students, _, _ = _build()
    a = students.add(OWNER, "Asha")
    b = students.add(OWNER, "Bilal")
    _pay(svc, a)
    _pay(svc, a, month="2025-05")
    _pay(svc, b, payment_mode="Online", utr_number="U1")

    page = svc.list_payments(owner_id=OWNER, page=PageRequest(page=1, limit=2))
    by_student = svc.list_payments(owner_id=OWNER, page=PageRequest(page=1, limit=10), student_id=a)
    online = svc.list_payments(owner_id=OWNER, page=PageRequest(page=1, limit=10), payment_mode="Online")

    assert page.total == 3
    assert len(page.items) == 2
    assert page.pagination()["hasNextPage"] is True
    assert by_student.total == 2
    assert [p.student_name for p in online.items] == ["Bilal"]


def test_toggle_billing_management_updates_all_student_payments():
    svc, students, payments, _ = _build()
    a = students.add(OWNER, "Asha")
    _pay(svc, a)
    _pay(svc, a, month="2025-05")

    changed = svc.toggle_billing_management(owner_id=OWNER, student_id=a, is_active=False)

    assert changed == 2
    assert all(not p.is_active for p in payments.rows.values())
    with pytest.raises(NotFoundError):
        svc.toggle_billing_management(owner_id=OWNER, student_id=404, is_active=True)


@pytest.mark.parametrize("amount", ["nan", "inf", "-inf", "0", 0, True])
def test_add_payment_rejects_non_finite_zero_and_boolean_amounts(amount):
    svc, students, payments, _ = _build()
    a = students.add(OWNER, "Asha")

    with pytest.raises(ValidationError):
        _pay(svc, a, amount=amount)
    assert payments.rows == {}


def test_update_payment_validates_amount_and_accepts_numeric_time():
    svc, students, _, _ = _build()
    a = students.add(OWNER, "Asha")
    payment = _pay(svc, a)

    with pytest.raises(ValidationError):
        svc.update_payment(owner_id=OWNER, payment_id=payment.payment_id, amount="nan")

    updated = svc.update_payment(owner_id=OWNER, payment_id=payment.payment_id, payment_time=1030)

    assert updated.payment_time == "1030"
