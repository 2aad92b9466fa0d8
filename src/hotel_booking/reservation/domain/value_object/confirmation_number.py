from __future__ import annotations

import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class ConfirmationNumber:
    """予約確認番号（先頭が 0 でない 10 桁の数字）"""

    LENGTH: ClassVar[int] = 10
    _PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"[1-9][0-9]{9}")

    value: str

    def __post_init__(self) -> None:
        value = str(self.value).strip()
        if not self._PATTERN.fullmatch(value):
            raise ValueError(f"Invalid confirmation number: {self.value}")
        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(
        cls, randbelow: Callable[[int], int] = secrets.randbelow
    ) -> ConfirmationNumber:
        """10 桁の番号空間から無作為に 1 つ引く"""
        lower = 10 ** (cls.LENGTH - 1)
        return cls(value=str(lower + randbelow(9 * lower)))
