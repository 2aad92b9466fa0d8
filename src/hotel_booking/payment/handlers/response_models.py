from pydantic import BaseModel

from hotel_booking.payment.applications.capture_payment import CaptureResult


class CaptureData(BaseModel):
    """請求結果のレスポンスモデル"""

    confirmation_number: str
    transaction_id: str
    charged_amount: str
    charged_currency: str
    paid_amount: str
    total_amount: str
    currency: str
    charge_count: int
    payment_mode: str
    fallback_used: bool


class SuccessResponse(BaseModel):
    """成功レスポンスモデル"""

    status: str = "success"
    charged: bool = True
    data: CaptureData


class ErrorResponse(BaseModel):
    """エラーレスポンスモデル

    charged=False は「ゲートウェイで一切請求されていない」ことを示す。
    """

    status: str = "error"
    error_code: str
    message: str
    charged: bool = False
    transaction_id: str | None = None


def to_response(result: CaptureResult) -> dict:
    """CaptureResult をレスポンス辞書に変換する"""
    reservation = result.reservation
    return SuccessResponse(
        data=CaptureData(
            confirmation_number=str(reservation.id),
            transaction_id=result.settled_reference,
            charged_amount=str(result.charged_amount.amount),
            charged_currency=str(result.charged_amount.currency),
            paid_amount=str(result.paid_amount.amount),
            total_amount=str(reservation.total_amount.amount),
            currency=str(reservation.total_amount.currency),
            charge_count=reservation.payment.charge_count,
            payment_mode=reservation.payment_mode.value,
            fallback_used=result.fallback_used,
        )
    ).model_dump()
