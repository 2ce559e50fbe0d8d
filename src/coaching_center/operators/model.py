from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Operator:
    """Domain entity: the account that owns students, payments and notifications.

    Note: Plain data object (no DB access code).
    """

    operator_id: int
    full_name: str
    email: str
    mobile_number: str
    password_hash: str
    is_active: bool = True
    profile_image_path: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "operatorId": self.operator_id,
            "fullName": self.full_name,
            "email": self.email,
            "mobileNumber": self.mobile_number,
            "profileImagePath": self.profile_image_path,
        }
