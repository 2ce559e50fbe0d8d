from __future__ import annotations

from enum import Enum


class NotificationType(str, Enum):
    """Notification kinds stored in the notifications table."""

    OVERDUE_PAYMENT = "overdue_payment"
    PAYMENT_RECEIVED = "payment_received"
    ATTENDANCE = "attendance"
    OTHER = "other"


class PaymentMode(str, Enum):
    CASH = "Cash"
    ONLINE = "Online"
    GOOGLE_PAY = "Google Pay"
    PAYTM = "Paytm"
    PHONEPE = "PhonePe"
    OTHER = "Other"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class MealType(str, Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
