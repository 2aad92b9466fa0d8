from dataclasses import dataclass
from datetime import datetime

from hotel_booking.shared.domain import Money


@dataclass(frozen=True)
class ReservationCreated:
    """予約が作成された"""

    confirmation_number: str
    occurred_at: datetime


@dataclass(frozen=True)
class PaymentCaptured:
    """請求（部分請求を含む）が確定した"""

    confirmation_number: str
    transaction_id: str
    charged_amount: Money
    credited_amount: Money
    paid_amount: Money
    charge_count: int
    fallback_used: bool
    occurred_at: datetime
