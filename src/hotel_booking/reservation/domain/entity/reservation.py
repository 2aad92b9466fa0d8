from datetime import datetime, timedelta, timezone

from hotel_booking.reservation.domain.enum import PaymentMode
from hotel_booking.reservation.domain.event import PaymentCaptured, ReservationCreated
from hotel_booking.reservation.domain.value_object import (
    ConfirmationNumber,
    GuestIdentity,
    PaymentDetails,
    RoomSelection,
    StayPeriod,
)
from hotel_booking.shared.domain import AggregateRoot, Money
from hotel_booking.shared.domain.exception import (
    AlreadyCapturedException,
    BusinessRuleViolationException,
    CaptureAmountExceedsBalanceException,
    CaptureInProgressException,
    ValidationException,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Reservation(AggregateRoot[ConfirmationNumber]):
    """予約エンティティ（集約ルート）

    paid_amount は単調増加し、total_amount を超えない。
    """

    def __init__(
        self,
        id: ConfirmationNumber,
        hotel_id: str,
        guest: GuestIdentity,
        stay_period: StayPeriod,
        rooms: RoomSelection,
        total_amount: Money,
        payment_mode: PaymentMode = PaymentMode.NOT_PAID,
        payment: PaymentDetails | None = None,
        paid_amount: Money | None = None,
        commission: Money | None = None,
        created_at: datetime | None = None,
        version: int = 0,
    ) -> None:
        super().__init__(id, version=version)
        if not hotel_id:
            raise ValueError("Hotel id cannot be empty")
        self._hotel_id = hotel_id
        self._guest = guest
        self._stay_period = stay_period
        self._rooms = rooms
        self._total_amount = total_amount
        self._payment_mode = payment_mode
        self._payment = payment or PaymentDetails.unauthorized()
        self._paid_amount = paid_amount or Money.zero(total_amount.currency)
        self._commission = commission or Money.zero(total_amount.currency)
        self._created_at = created_at or _utcnow()

        if self._paid_amount.is_greater_than(self._total_amount):
            raise BusinessRuleViolationException(
                "Paid amount cannot exceed the total amount"
            )

    @classmethod
    def create(
        cls,
        id: ConfirmationNumber,
        hotel_id: str,
        guest: GuestIdentity,
        stay_period: StayPeriod,
        rooms: RoomSelection,
        total_amount: Money,
        payment_mode: PaymentMode,
        payment: PaymentDetails,
        commission: Money | None = None,
    ) -> "Reservation":
        """新規予約を生成し、ReservationCreated を記録する"""
        reservation = cls(
            id=id,
            hotel_id=hotel_id,
            guest=guest,
            stay_period=stay_period,
            rooms=rooms,
            total_amount=total_amount,
            payment_mode=payment_mode,
            payment=payment,
            commission=commission,
        )
        reservation.add_domain_event(
            ReservationCreated(
                confirmation_number=str(id), occurred_at=reservation.created_at
            )
        )
        return reservation

    @property
    def confirmation_number(self) -> ConfirmationNumber:
        return self._id

    @property
    def hotel_id(self) -> str:
        return self._hotel_id

    @property
    def guest(self) -> GuestIdentity:
        return self._guest

    @property
    def stay_period(self) -> StayPeriod:
        return self._stay_period

    @property
    def rooms(self) -> RoomSelection:
        return self._rooms

    @property
    def total_amount(self) -> Money:
        return self._total_amount

    @property
    def paid_amount(self) -> Money:
        return self._paid_amount

    @property
    def commission(self) -> Money:
        return self._commission

    @property
    def payment_mode(self) -> PaymentMode:
        return self._payment_mode

    @property
    def payment(self) -> PaymentDetails:
        return self._payment

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def outstanding_amount(self) -> Money:
        """未払い残高"""
        return self._total_amount.subtract(self._paid_amount)

    def ensure_capturable(self, credited: Money) -> None:
        """請求前の事前条件を確認する（ゲートウェイ呼び出し前に行う）"""
        if credited.currency != self._total_amount.currency:
            raise ValidationException(
                f"Credited amount must be in {self._total_amount.currency}, "
                f"got {credited.currency}"
            )
        if credited.is_zero():
            raise ValidationException("Capture amount must be greater than zero")
        if not self._total_amount.is_greater_than(self._paid_amount):
            raise AlreadyCapturedException(
                f"Reservation {self._id} is already fully paid"
            )
        if credited.is_greater_than(self.outstanding_amount()):
            raise CaptureAmountExceedsBalanceException(
                f"Capture of {credited} exceeds the outstanding balance "
                f"{self.outstanding_amount()}"
            )

    def begin_capture(self, now: datetime, lease_ttl: timedelta) -> None:
        """請求の排他リースを取得し capturing を立てる"""
        if self._payment.has_active_lease(now):
            raise CaptureInProgressException(
                f"A capture is already in progress for reservation {self._id}"
            )
        self._payment = self._payment.with_lease(now + lease_ttl)
        self._increment_version()

    def release_capture(self, capturing: bool) -> None:
        """請求に失敗したときにリースを解放し capturing を元に戻す"""
        self._payment = self._payment.without_lease(capturing)
        self._increment_version()

    def record_capture(
        self,
        transaction_id: str,
        charged: Money,
        credited: Money,
        fallback_used: bool,
        now: datetime | None = None,
    ) -> None:
        """売上確定を台帳に反映する（部分請求は累積する）"""
        self.ensure_capturable(credited)
        self._paid_amount = self._paid_amount.add(credited)
        self._payment = self._payment.with_settlement(transaction_id, charged)
        self._payment_mode = (
            PaymentMode.PAID_ONLINE
            if self._paid_amount == self._total_amount
            else PaymentMode.DEPOSIT_PAID
        )
        self._increment_version()
        self.add_domain_event(
            PaymentCaptured(
                confirmation_number=str(self._id),
                transaction_id=transaction_id,
                charged_amount=charged,
                credited_amount=credited,
                paid_amount=self._paid_amount,
                charge_count=self._payment.charge_count,
                fallback_used=fallback_used,
                occurred_at=now or _utcnow(),
            )
        )
