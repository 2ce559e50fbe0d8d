from __future__ import annotations

from typing import Optional, Protocol

from .model import Operator


class OperatorRepository(Protocol):
    """Repository interface for Operator.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, operator_id: int) -> Optional[Operator]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Operator]:
        raise NotImplementedError

    def get_by_mobile(self, mobile_number: str) -> Optional[Operator]:
        raise NotImplementedError

    def create(self, *, full_name: str, email: str, mobile_number: str, password_hash: str) -> int:
        raise NotImplementedError

    def update_profile(self, operator_id: int, *, full_name: str, profile_image_path: Optional[str]) -> bool:
        raise NotImplementedError
