from __future__ import annotations

import math
import re
from enum import Enum
from typing import Type, TypeVar

from ..core.exceptions import ValidationError
from .datetime_utils import is_period_key

_EMAIL_RE = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
_TEN_DIGITS_RE = re.compile(r"^[0-9]{10}$")

E = TypeVar("E", bound=Enum)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")
    return email


def require_ten_digits(value: str, field_name: str) -> str:
    number = require_non_empty(value, field_name)
    if not _TEN_DIGITS_RE.match(number):
        raise ValidationError(f"{field_name} must be exactly 10 digits")
    return number


def require_period(value: str) -> str:
    period = require_non_empty(value, "Payment month")
    if not is_period_key(period):
        raise ValidationError("Payment month must use the YYYY-MM format")
    return period


def require_amount(value, *, allow_zero: bool = True) -> float:
    if isinstance(value, bool):
        raise ValidationError("Amount must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a number")
    if not math.isfinite(amount):
        raise ValidationError("Amount must be a number")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError("Amount must be positive")
    return amount


def require_choice(value: str, enum_cls: Type[E], field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")
