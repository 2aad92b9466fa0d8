from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from hotel_booking.payment.domain.value_object import CardDetails, EncryptedCard
from hotel_booking.reservation.domain.entity import Reservation
from hotel_booking.reservation.domain.enum import PaymentMode
from hotel_booking.reservation.domain.factory import ReservationDetails
from hotel_booking.reservation.domain.value_object import (
    ConfirmationNumber,
    GuestIdentity,
    PaymentDetails,
    RoomSelection,
    StayPeriod,
)
from hotel_booking.shared.domain import Money
from hotel_booking.shared.infrastructure.fernet_secret_codec import FernetSecretCodec


@pytest.fixture
def mock_repository():
    """リポジトリのモックフィクスチャ"""
    return MagicMock()


@pytest.fixture
def codec():
    return FernetSecretCodec(key="unit-test-key")


@pytest.fixture
def card():
    return CardDetails(
        number="4111 1111 1111 1111",
        expiry="12/30",
        cvv="123",
        holder_name="Ahmed Ali",
    )


@pytest.fixture
def reservation_details():
    """予約作成の入力を生成する Factory fixture"""

    def _factory(**overrides) -> ReservationDetails:
        details: ReservationDetails = {
            "hotel_id": "hotel-1",
            "guest_name": "Ahmed  Ali",
            "email": "Ahmed@Example.com",
            "phone": "+966 (50) 123-4567",
            "nationality": "SA",
            "check_in_date": "2025-06-01",
            "check_out_date": "2025-06-04",
            "rooms": [{"room_type": "double", "display_name": "Double Room", "count": 2}],
            "total_amount": Decimal("300.00"),
            "currency": "SAR",
            "payment_mode": PaymentMode.DEPOSIT_PAID.value,
        }
        details.update(overrides)  # type: ignore[typeddict-item]
        return details

    return _factory


@pytest.fixture
def create_reservation(codec, card):
    """Reservation を生成する Factory fixture（Factories as fixtures パターン）"""

    def _factory(
        confirmation_number: str = "1234567890",
        total_amount: Decimal = Decimal("300.00"),
        paid_amount: Decimal = Decimal("0"),
        currency: str = "SAR",
        payment_mode: PaymentMode = PaymentMode.DEPOSIT_PAID,
        transaction_id: str | None = "hold-1",
        with_card: bool = True,
        phone: str = "0501234567",
        rooms: list[dict] | None = None,
        reserved_by: str = "",
        payment: PaymentDetails | None = None,
        version: int = 0,
    ) -> Reservation:
        if payment is None:
            payment = PaymentDetails(
                card=EncryptedCard.encrypt(card, codec) if with_card else EncryptedCard(),
                transaction_id=transaction_id,
            )
        return Reservation(
            id=ConfirmationNumber(value=confirmation_number),
            hotel_id="hotel-1",
            guest=GuestIdentity(
                name="Ahmed Ali",
                email="ahmed@example.com",
                phone=phone,
                nationality="SA",
                reserved_by=reserved_by,
            ),
            stay_period=StayPeriod.from_strings("2025-06-01", "2025-06-04"),
            rooms=RoomSelection.of(
                rooms
                or [{"room_type": "double", "display_name": "Double Room", "count": 2}]
            ),
            total_amount=Money.of(total_amount, currency),
            paid_amount=Money.of(paid_amount, currency),
            payment_mode=payment_mode,
            payment=payment,
            created_at=datetime(2025, 5, 1, 9, 0, tzinfo=timezone.utc),
            version=version,
        )

    return _factory


@dataclass
class FakeLambdaContext:
    function_name: str = "hotel-booking-test"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = (
        "arn:aws:lambda:ap-northeast-1:123456789012:function:hotel-booking-test"
    )
    aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"
    remaining_time_in_millis: int = 30000

    def get_remaining_time_in_millis(self) -> int:
        return self.remaining_time_in_millis


@pytest.fixture
def lambda_context():
    return FakeLambdaContext()
