from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class StayPeriod:
    """滞在期間(チェックイン日 + チェックアウト日)"""

    check_in: date
    check_out: date

    def __post_init__(self) -> None:
        if self.check_out <= self.check_in:
            raise ValueError("Check-out date must be after check-in date")

    @classmethod
    def from_strings(cls, check_in: str, check_out: str) -> StayPeriod:
        """YYYY-MM-DD 形式の文字列から生成"""
        try:
            check_in_date = date.fromisoformat(check_in)
            check_out_date = date.fromisoformat(check_out)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid date format: {e}") from e
        return cls(check_in=check_in_date, check_out=check_out_date)

    def nights(self) -> int:
        """宿泊数を計算する"""
        return (self.check_out - self.check_in).days
