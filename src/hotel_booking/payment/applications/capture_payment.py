from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from aws_lambda_powertools import Logger

from hotel_booking.payment.domain.gateway import PaymentGateway
from hotel_booking.payment.domain.value_object import CardDetails, ChargeContext
from hotel_booking.reservation.domain.entity import Reservation
from hotel_booking.reservation.domain.notifier import ReservationNotifier
from hotel_booking.reservation.domain.repository import ReservationRepository
from hotel_booking.reservation.domain.value_object import ConfirmationNumber
from hotel_booking.shared.domain import Deadline, Money, SecretCodec
from hotel_booking.shared.domain.exception import (
    CaptureInProgressException,
    HoldNotFoundException,
    OptimisticLockException,
    ResourceNotFoundException,
    SettlementNotRecordedException,
    ValidationException,
)

logger = Logger(child=True)

DEFAULT_LEASE_TTL = timedelta(seconds=60)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CaptureResult:
    """請求の結果"""

    reservation: Reservation
    settled_reference: str
    charged_amount: Money
    paid_amount: Money
    fallback_used: bool


class CapturePaymentService:
    """予約に対する請求（部分請求を含む）ユースケース

    1. 既存のホールドに対して売上確定を試みる
    2. ホールドが失効していれば保存済みカードで直接請求する
    3. 成功したら paid_amount に加算し charge_count を進める

    同じ予約への同時請求はリース（capturing + 期限）で直列化する。
    台帳の更新は最後に行うため、途中で落ちても paid_amount は変わらない。
    """

    def __init__(
        self,
        repository: ReservationRepository,
        gateway: PaymentGateway,
        codec: SecretCodec,
        notifier: ReservationNotifier,
        lease_ttl: timedelta = DEFAULT_LEASE_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repository = repository
        self._gateway = gateway
        self._codec = codec
        self._notifier = notifier
        self._lease_ttl = lease_ttl
        self._clock = clock

    def capture(
        self,
        confirmation_number: ConfirmationNumber,
        amount: Money,
        ledger_amount: Money | None = None,
        deadline: Deadline | None = None,
    ) -> CaptureResult:
        """amount をゲートウェイで請求し、ledger_amount（省略時は amount）を入金として記録する"""
        deadline = deadline or Deadline.unbounded()
        credited = ledger_amount or amount

        reservation = self._repository.find_by_id(confirmation_number)
        if reservation is None:
            raise ResourceNotFoundException(
                f"Reservation not found: {confirmation_number}"
            )
        reservation.ensure_capturable(credited)

        card = self._decrypt_card(reservation)
        if card is None and not reservation.payment.transaction_id:
            raise ValidationException(
                f"No payment instrument on file for reservation {confirmation_number}"
            )

        deadline.ensure_not_expired("capture")
        previous_capturing = reservation.payment.capturing
        self._acquire_lease(reservation)

        try:
            settled_reference, fallback_used = self._settle(
                reservation, card, amount, deadline
            )
        except Exception:
            self._release_lease(reservation, previous_capturing)
            raise

        self._record(reservation, settled_reference, amount, credited, fallback_used)
        self._notify(reservation)

        return CaptureResult(
            reservation=reservation,
            settled_reference=settled_reference,
            charged_amount=amount,
            paid_amount=reservation.paid_amount,
            fallback_used=fallback_used,
        )

    def _decrypt_card(self, reservation: Reservation) -> CardDetails | None:
        """保存済みカードを復号する（失敗時はゲートウェイ呼び出し前に中断）"""
        if reservation.payment.card.is_empty():
            return None
        return reservation.payment.card.decrypt(self._codec)

    def _acquire_lease(self, reservation: Reservation) -> None:
        expected_version = reservation.version
        reservation.begin_capture(self._clock(), self._lease_ttl)
        try:
            self._repository.update(reservation, expected_version=expected_version)
        except OptimisticLockException as e:
            raise CaptureInProgressException(
                f"Reservation {reservation.id} was modified concurrently"
            ) from e

    def _release_lease(self, reservation: Reservation, capturing: bool) -> None:
        expected_version = reservation.version
        reservation.release_capture(capturing)
        try:
            self._repository.update(reservation, expected_version=expected_version)
        except OptimisticLockException:
            # リースは期限切れで自然に解放される
            logger.warning(
                "Could not release capture lease",
                extra={"confirmation_number": str(reservation.id)},
            )

    def _settle(
        self,
        reservation: Reservation,
        card: CardDetails | None,
        amount: Money,
        deadline: Deadline,
    ) -> tuple[str, bool]:
        """(取引 ID, フォールバックしたか) を返す"""
        context = self._charge_context(reservation)
        hold_reference = reservation.payment.transaction_id

        if hold_reference:
            try:
                settled = self._gateway.capture_hold(
                    hold_reference, amount, context, deadline
                )
                logger.info(
                    "Captured against existing hold",
                    extra={
                        "confirmation_number": str(reservation.id),
                        "hold_reference": hold_reference,
                        "transaction_id": settled,
                    },
                )
                return settled, False
            except HoldNotFoundException:
                logger.warning(
                    "Hold not found at gateway, falling back to direct charge",
                    extra={
                        "confirmation_number": str(reservation.id),
                        "hold_reference": hold_reference,
                    },
                )

        if card is None:
            raise ValidationException(
                f"Hold expired and no card on file for reservation {reservation.id}"
            )
        settled = self._gateway.authorize_and_capture(card, amount, context, deadline)
        logger.info(
            "Captured with direct charge",
            extra={"confirmation_number": str(reservation.id), "transaction_id": settled},
        )
        return settled, True

    def _record(
        self,
        reservation: Reservation,
        settled_reference: str,
        charged: Money,
        credited: Money,
        fallback_used: bool,
    ) -> None:
        expected_version = reservation.version
        reservation.record_capture(
            settled_reference, charged, credited, fallback_used, now=self._clock()
        )
        try:
            self._repository.update(reservation, expected_version=expected_version)
        except OptimisticLockException as e:
            logger.error(
                "Funds settled but reservation update failed; reconcile manually",
                extra={
                    "confirmation_number": str(reservation.id),
                    "transaction_id": settled_reference,
                    "amount": str(charged),
                },
            )
            raise SettlementNotRecordedException(
                f"Payment {settled_reference} was settled but not recorded",
                settled_reference=settled_reference,
            ) from e
        logger.info(
            "Payment recorded",
            extra={
                "confirmation_number": str(reservation.id),
                "paid_amount": str(reservation.paid_amount),
                "charge_count": reservation.payment.charge_count,
            },
        )

    def _notify(self, reservation: Reservation) -> None:
        events = reservation.flush_domain_events()
        try:
            self._notifier.publish(reservation, events)
        except Exception:
            logger.exception(
                "Failed to publish payment notification",
                extra={"confirmation_number": str(reservation.id)},
            )

    @staticmethod
    def _charge_context(reservation: Reservation) -> ChargeContext:
        return ChargeContext(
            invoice_number=str(reservation.id),
            guest_name=reservation.guest.name,
            email=reservation.guest.email,
            nationality=reservation.guest.nationality,
            hotel_id=reservation.hotel_id,
            check_in=reservation.stay_period.check_in.isoformat(),
            check_out=reservation.stay_period.check_out.isoformat(),
            description="Reservation payment",
        )
