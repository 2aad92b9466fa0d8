from __future__ import annotations

import re
from dataclasses import dataclass, field

_EXPIRY_PATTERN = re.compile(r"^(0[1-9]|1[0-2])/?(\d{2}|\d{4})$|^\d{4}-(0[1-9]|1[0-2])$")


@dataclass(frozen=True)
class CardDetails:
    """平文のカード情報（決済手段）

    復号後はこの値を呼び出しの間だけ保持し、永続化・ログ出力はしない。
    """

    number: str = field(repr=False)
    expiry: str = field(repr=False)
    cvv: str = field(repr=False)
    holder_name: str = ""

    def __post_init__(self) -> None:
        number = re.sub(r"[\s-]", "", self.number or "")
        if not number.isascii() or not number.isdigit() or not 12 <= len(number) <= 19:
            raise ValueError("Invalid card number")
        expiry = (self.expiry or "").strip()
        if not _EXPIRY_PATTERN.match(expiry):
            raise ValueError("Invalid card expiry date (expected MM/YY, MM/YYYY or YYYY-MM)")
        cvv = (self.cvv or "").strip()
        if not cvv.isascii() or not cvv.isdigit() or len(cvv) not in (3, 4):
            raise ValueError("Invalid card CVV")
        object.__setattr__(self, "number", number)
        object.__setattr__(self, "expiry", expiry)
        object.__setattr__(self, "cvv", cvv)
        object.__setattr__(self, "holder_name", " ".join((self.holder_name or "").split()))

    @property
    def last4(self) -> str:
        return self.number[-4:]

    def __repr__(self) -> str:
        return f"CardDetails(number='****{self.last4}')"
