from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Currency:
    """通貨コード（ISO 4217）

    サポート対象: SAR（宿泊料金の通貨）, USD（決済通貨）, EUR
    """

    SUPPORTED: ClassVar[frozenset[str]] = frozenset({"SAR", "USD", "EUR"})

    code: str

    def __post_init__(self) -> None:
        normalized = self.code.strip().upper()
        if normalized not in self.SUPPORTED:
            raise ValueError(
                f"Unsupported currency: {self.code}. "
                f"Supported: {', '.join(sorted(self.SUPPORTED))}"
            )
        object.__setattr__(self, "code", normalized)

    def __str__(self) -> str:
        return self.code

    @classmethod
    def sar(cls) -> Currency:
        """サウジアラビア・リヤル"""
        return cls("SAR")

    @classmethod
    def usd(cls) -> Currency:
        """米ドル"""
        return cls("USD")
