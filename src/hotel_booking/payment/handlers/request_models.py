from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from hotel_booking.shared.utils import MAX_AMOUNT, to_decimal


class CapturePaymentRequest(BaseModel):
    """請求（売上確定）リクエストモデル

    amount はゲートウェイで請求する金額、ledger_amount は予約の通貨で
    入金として記録する金額（省略時は amount を記録する）。
    """

    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, description="請求金額（0より大きい値）")
    currency: str = Field(
        default="USD",
        pattern="^[A-Z]{3}$",
        description="請求通貨（ISO 4217）",
    )
    ledger_amount: Decimal | None = Field(default=None, gt=0, le=MAX_AMOUNT)
    ledger_currency: str | None = Field(default=None, pattern="^[A-Z]{3}$")

    @field_validator("amount", "ledger_amount", mode="before")
    @classmethod
    def convert_amount_to_decimal(cls, v):
        if v is None:
            return v
        return to_decimal(v)

    @model_validator(mode="after")
    def check_ledger_pair(self):
        if (self.ledger_amount is None) != (self.ledger_currency is None):
            raise ValueError("ledger_amount and ledger_currency must be given together")
        return self
