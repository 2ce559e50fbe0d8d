from __future__ import annotations

import pytest

from coaching_center.common.pagination import PageRequest
from coaching_center.core.enums import Gender
from coaching_center.core.exceptions import ConflictError, NotFoundError, ValidationError
from coaching_center.students.service import StudentService
from tests.fakes import FakeStudentsRepo

OWNER = 1


def _add(svc, **overrides):
    fields = dict(
        owner_id=OWNER,
        full_name="Asha Rao",
        email="Asha@Example.com",
        phone_number="9876543210",
        gender="Female",
    )
    fields.update(overrides)
    return svc.add_student(**fields)


def test_add_student_normalizes_and_persists():
    svc = StudentService(FakeStudentsRepo())

    student = _add(svc, full_name="  Asha Rao ")

    assert student.full_name == "Asha Rao"
    assert student.email == "asha@example.com"
    assert student.gender == Gender.FEMALE
    assert student.is_active is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"full_name": "A"},
        {"full_name": ""},
        {"email": "not-an-email"},
        {"phone_number": "12345"},
        {"gender": "Unknown"},
    ],
)
def test_add_student_rejects_invalid_fields(overrides):
    svc = StudentService(FakeStudentsRepo())

    with pytest.raises(ValidationError):
        _add(svc, **overrides)


def test_duplicate_email_or_phone_is_a_conflict_within_owner_only():
    svc = StudentService(FakeStudentsRepo())
    _add(svc)

    with pytest.raises(ConflictError):
        _add(svc, phone_number="9000000001")
    with pytest.raises(ConflictError):
        _add(svc, email="other@example.com")

    other = _add(svc, owner_id=OWNER + 1)
    assert other.owner_id == OWNER + 1


def test_foreign_students_are_not_found():
    repo = FakeStudentsRepo()
    svc = StudentService(repo)
    foreign = repo.add(OWNER + 1, "Zed")

    with pytest.raises(NotFoundError):
        svc.get_student(owner_id=OWNER, student_id=foreign)
    with pytest.raises(NotFoundError):
        svc.update_student(owner_id=OWNER, student_id=foreign, full_name="Hacked")
    with pytest.raises(NotFoundError):
        svc.delete_student(owner_id=OWNER, student_id=foreign)
    assert repo.rows[foreign].full_name == "Zed"


def test_update_student_changes_only_given_fields():
    svc = StudentService(FakeStudentsRepo())
    student = _add(svc)

    updated = svc.update_student(owner_id=OWNER, student_id=student.student_id, full_name="Asha R", is_active=False)

    assert updated.full_name == "Asha R"
    assert updated.email == "asha@example.com"
    assert updated.is_active is False


def test_update_student_keeps_own_email_without_conflict():
    svc = StudentService(FakeStudentsRepo())
    student = _add(svc)

    updated = svc.update_student(owner_id=OWNER, student_id=student.student_id, email="asha@example.com")

    assert updated.student_id == student.student_id


def test_set_active_and_list_with_filters():
    repo = FakeStudentsRepo()
    svc = StudentService(repo)
    asha = _add(svc)
    _add(svc, full_name="Bilal Khan", email="bilal@example.com", phone_number="9876500000", gender="Male")

    svc.set_active(owner_id=OWNER, student_id=asha.student_id, is_active=False)

    active = svc.list_students(owner_id=OWNER, page=PageRequest(page=1, limit=10), is_active=True)
    found = svc.list_students(owner_id=OWNER, page=PageRequest(page=1, limit=10), search="asha")

    assert [s.full_name for s in active.items] == ["Bilal Khan"]
    assert [s.student_id for s in found.items] == [asha.student_id]
    assert found.pagination() == {
        "currentPage": 1,
        "totalPages": 1,
        "total": 1,
        "limit": 10,
        "hasNextPage": False,
        "hasPrevPage": False,
    }


def test_delete_student():
    repo = FakeStudentsRepo()
    svc = StudentService(repo)
    student = _add(svc)

    svc.delete_student(owner_id=OWNER, student_id=student.student_id)

    assert repo.rows == {}
