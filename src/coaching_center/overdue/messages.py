from __future__ import annotations

from typing import Iterable


def format_overdue_message(count: int, period: str) -> str:
    # Verb stays "have" for a single student; clients match on this text.
    return f"{count} student{'s' if count != 1 else ''} have overdue payments for {period}"


def same_members(left: Iterable[int], right: Iterable[int]) -> bool:
    """Order-independent comparison of two student id collections."""
    return {int(i) for i in left} == {int(i) for i in right}
