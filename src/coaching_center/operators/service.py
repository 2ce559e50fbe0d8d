from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty, require_ten_digits
from ..core.constants import MIN_FULL_NAME_LENGTH, MIN_PASSWORD_LENGTH, UNSET
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import Operator
from .repository import OperatorRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionOperator:
    """What we store into the Flask session after login."""

    operator_id: int
    full_name: str
    email: str


class AuthService:
    """Use cases: register an operator account and log in."""

    def __init__(self, operators: OperatorRepository):
        self._operators = operators

    def register(self, *, full_name: str, email: str, mobile_number: str, password: str) -> SessionOperator:
        full_name = require_non_empty(full_name, "Full name")
        email = require_email(email)
        mobile_number = require_ten_digits(mobile_number, "Mobile number")
        password = require_min_length(password or "", "Password", MIN_PASSWORD_LENGTH)

        if self._operators.get_by_email(email):
            raise ConflictError("Email already registered")
        if self._operators.get_by_mobile(mobile_number):
            raise ConflictError("Mobile number already registered")

        operator_id = self._operators.create(
            full_name=full_name,
            email=email,
            mobile_number=mobile_number,
            password_hash=generate_password_hash(password),
        )
        logger.info("Registered operator %s", operator_id)
        return SessionOperator(operator_id=operator_id, full_name=full_name, email=email)

    def authenticate(self, email: str, password: str) -> SessionOperator:
        operator = self._operators.get_by_email((email or "").strip().lower())
        if not operator or not operator.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(operator.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionOperator(
            operator_id=operator.operator_id,
            full_name=operator.full_name,
            email=operator.email,
        )

    def update_profile(self, operator_id: int, *, full_name: Optional[str] = None, profile_image_path=UNSET) -> Operator:
        """Change display name and/or profile image; at least one must be given."""
        image_given = profile_image_path is not UNSET
        if not full_name and not (image_given and profile_image_path):
            raise ValidationError("At least one field (fullName or profileImagePath) is required")

        current = self._operators.get_by_id(int(operator_id))
        if not current:
            raise NotFoundError("Operator not found")

        new_name = current.full_name
        if full_name:
            new_name = require_min_length(str(full_name).strip(), "Full name", MIN_FULL_NAME_LENGTH)

        new_image = current.profile_image_path
        if image_given:
            new_image = str(profile_image_path).strip() if profile_image_path else None

        self._operators.update_profile(current.operator_id, full_name=new_name, profile_image_path=new_image or None)
        logger.info("Operator %s updated profile", current.operator_id)
        return self._operators.get_by_id(current.operator_id)
