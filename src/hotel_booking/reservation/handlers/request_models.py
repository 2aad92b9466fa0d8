from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from hotel_booking.shared.utils import MAX_AMOUNT, to_decimal


class RoomRequest(BaseModel):
    room_type: str = Field(..., min_length=1)
    display_name: str = Field(default="")
    count: int = Field(..., ge=1)


class CardRequest(BaseModel):
    """カード情報（与信にのみ使い、レスポンスには含めない）"""

    number: str = Field(..., min_length=12, repr=False)
    expiry: str = Field(..., min_length=4, repr=False)
    cvv: str = Field(..., min_length=3, max_length=4, repr=False)
    holder_name: str = Field(default="")


class CreateReservationRequest(BaseModel):
    """予約作成リクエストモデル"""

    hotel_id: str = Field(..., min_length=1)
    guest_name: str = Field(..., min_length=1)
    email: str = Field(default="")
    phone: str = Field(..., min_length=1)
    nationality: str = Field(default="")
    check_in_date: str = Field(..., description="チェックイン日（YYYY-MM-DD）")
    check_out_date: str = Field(..., description="チェックアウト日（YYYY-MM-DD）")
    rooms: list[RoomRequest] = Field(..., min_length=1)
    total_amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, description="宿泊総額")
    currency: str = Field(
        default="SAR",
        pattern="^[A-Z]{3}$",
        description="通貨コード（ISO 4217）",
    )
    payment_mode: str = Field(default="Not Paid")
    commission: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    reserved_by: str = Field(default="")
    card: CardRequest | None = None

    @field_validator("total_amount", "commission", mode="before")
    @classmethod
    def convert_amount_to_decimal(cls, v):
        return to_decimal(v)
