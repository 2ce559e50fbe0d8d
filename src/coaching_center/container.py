from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .billing.mysql_payment_repository import MySQLPaymentRepository
from .billing.repository import PaymentRepository
from .billing.service import BillingService
from .common.datetime_utils import now_local
from .database.connection import DatabaseConnection, DBConfig
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .operators.mysql_operator_repository import MySQLOperatorRepository
from .operators.repository import OperatorRepository
from .operators.service import AuthService
from .overdue.service import OverdueReconciliationService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    operators_repo: OperatorRepository
    students_repo: StudentRepository
    payments_repo: PaymentRepository
    notifications_repo: NotificationRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    student_service: StudentService
    notification_service: NotificationService
    overdue_service: OverdueReconciliationService
    billing_service: BillingService
    attendance_service: AttendanceService


def wire_container(
    *,
    operators_repo: OperatorRepository,
    students_repo: StudentRepository,
    payments_repo: PaymentRepository,
    notifications_repo: NotificationRepository,
    attendance_repo: AttendanceRepository,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    overdue_service = OverdueReconciliationService(students_repo, payments_repo, notifications_repo, clock=clock)

    return Container(
        operators_repo=operators_repo,
        students_repo=students_repo,
        payments_repo=payments_repo,
        notifications_repo=notifications_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(operators_repo),
        student_service=StudentService(students_repo),
        notification_service=NotificationService(notifications_repo),
        overdue_service=overdue_service,
        billing_service=BillingService(payments_repo, students_repo, overdue_service),
        attendance_service=AttendanceService(attendance_repo, students_repo, clock=clock),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire_container(
        operators_repo=MySQLOperatorRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
    )
