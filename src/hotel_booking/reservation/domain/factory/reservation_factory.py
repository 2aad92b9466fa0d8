from dataclasses import dataclass
from decimal import Decimal
from typing import NotRequired, TypedDict

from hotel_booking.reservation.domain.entity import Reservation
from hotel_booking.reservation.domain.enum import PaymentMode
from hotel_booking.reservation.domain.value_object import (
    ConfirmationNumber,
    GuestIdentity,
    PaymentDetails,
    RoomSelection,
    StayPeriod,
)
from hotel_booking.shared.domain import Currency, Money


class RoomDetails(TypedDict):
    """部屋選択の入力データ"""

    room_type: str
    display_name: str
    count: int


class ReservationDetails(TypedDict):
    """予約作成の入力データ構造（TypedDict）"""

    hotel_id: str
    guest_name: str
    email: str
    phone: str
    nationality: str
    check_in_date: str
    check_out_date: str
    rooms: list[RoomDetails]
    total_amount: Decimal
    currency: str
    payment_mode: str
    commission: NotRequired[Decimal]
    reserved_by: NotRequired[str]


@dataclass(frozen=True)
class ReservationCandidate:
    """検証済みの作成要求（確認番号の採番前）"""

    hotel_id: str
    guest: GuestIdentity
    stay_period: StayPeriod
    rooms: RoomSelection
    total_amount: Money
    payment_mode: PaymentMode
    commission: Money


class ReservationFactory:
    """予約を生成する Factory"""

    def build_candidate(self, details: ReservationDetails) -> ReservationCandidate:
        """入力を値オブジェクトに変換する（不正な値は ValueError）"""
        hotel_id = (details["hotel_id"] or "").strip()
        if not hotel_id:
            raise ValueError("Hotel id cannot be empty")

        currency = Currency(details["currency"])
        total_amount = Money(amount=details["total_amount"], currency=currency)
        if total_amount.is_zero():
            raise ValueError("Total amount must be greater than zero")

        return ReservationCandidate(
            hotel_id=hotel_id,
            guest=GuestIdentity(
                name=details["guest_name"],
                email=details["email"],
                phone=details["phone"],
                nationality=details["nationality"],
                reserved_by=details.get("reserved_by", ""),
            ),
            stay_period=StayPeriod.from_strings(
                details["check_in_date"], details["check_out_date"]
            ),
            rooms=RoomSelection.of(list(details["rooms"])),
            total_amount=total_amount,
            payment_mode=PaymentMode(details["payment_mode"]),
            commission=Money(
                amount=details.get("commission", Decimal("0")), currency=currency
            ),
        )

    def create(
        self,
        confirmation_number: ConfirmationNumber,
        candidate: ReservationCandidate,
        payment: PaymentDetails,
    ) -> Reservation:
        """新規予約のエンティティを作成する"""
        return Reservation.create(
            id=confirmation_number,
            hotel_id=candidate.hotel_id,
            guest=candidate.guest,
            stay_period=candidate.stay_period,
            rooms=candidate.rooms,
            total_amount=candidate.total_amount,
            payment_mode=candidate.payment_mode,
            payment=payment,
            commission=candidate.commission,
        )
