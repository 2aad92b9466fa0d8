from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .currency import Currency

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """金額（通貨情報含む）

    小数点以下 2 桁に丸めて保持する。
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        try:
            amount = Decimal(str(self.amount))
            if not amount.is_finite():
                raise ValueError(f"Invalid amount: {self.amount}")
            # 有効桁数を超える金額は quantize が InvalidOperation を送出する
            amount = amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {self.amount}") from e
        if amount < 0:
            raise ValueError("Amount cannot be negative")
        object.__setattr__(self, "amount", amount)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def formatted(self) -> str:
        """ゲートウェイ送信用の文字列（例: "150.00"）"""
        return f"{self.amount:.2f}"

    def is_zero(self) -> bool:
        return self.amount == 0

    def add(self, other: Money) -> Money:
        """金額を加算する"""
        self._ensure_same_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: Money) -> Money:
        """金額を減算する（負になる場合は ValueError）"""
        self._ensure_same_currency(other)
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def is_greater_than(self, other: Money) -> bool:
        self._ensure_same_currency(other)
        return self.amount > other.amount

    def _ensure_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Currency mismatch: {self.currency} and {other.currency}"
            )

    @classmethod
    def zero(cls, currency: Currency) -> Money:
        return cls(Decimal("0"), currency)

    @classmethod
    def of(cls, amount: Decimal | str, currency_code: str) -> Money:
        """金額と通貨コードから Money を生成"""
        return cls(amount, Currency(currency_code))
