from pydantic import BaseModel

from hotel_booking.reservation.domain.entity import Reservation


class RoomData(BaseModel):
    room_type: str
    display_name: str
    count: int


class ReservationData(BaseModel):
    """予約データのレスポンスモデル（カード情報は含めない）"""

    confirmation_number: str
    hotel_id: str
    guest_name: str
    email: str
    phone: str
    check_in_date: str
    check_out_date: str
    nights: int
    rooms: list[RoomData]
    total_amount: str
    paid_amount: str
    currency: str
    payment_mode: str
    authorized: bool


class SuccessResponse(BaseModel):
    """成功レスポンスモデル"""

    status: str = "success"
    data: ReservationData


class ErrorResponse(BaseModel):
    """エラーレスポンスモデル"""

    status: str = "error"
    error_code: str
    message: str
    existing_confirmation_number: str | None = None


def to_response(reservation: Reservation) -> dict:
    """Reservation エンティティをレスポンス辞書に変換する"""
    return SuccessResponse(
        data=ReservationData(
            confirmation_number=str(reservation.id),
            hotel_id=reservation.hotel_id,
            guest_name=reservation.guest.name,
            email=reservation.guest.email,
            phone=reservation.guest.phone,
            check_in_date=reservation.stay_period.check_in.isoformat(),
            check_out_date=reservation.stay_period.check_out.isoformat(),
            nights=reservation.stay_period.nights(),
            rooms=[
                RoomData(
                    room_type=line.room_type,
                    display_name=line.display_name,
                    count=line.count,
                )
                for line in reservation.rooms.lines
            ],
            total_amount=str(reservation.total_amount.amount),
            paid_amount=str(reservation.paid_amount.amount),
            currency=str(reservation.total_amount.currency),
            payment_mode=reservation.payment_mode.value,
            authorized=reservation.payment.transaction_id is not None,
        )
    ).model_dump()
