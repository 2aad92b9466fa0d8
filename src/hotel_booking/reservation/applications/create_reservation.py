from aws_lambda_powertools import Logger

from hotel_booking.payment.applications.authorize_card import AuthorizeCardService
from hotel_booking.payment.domain.value_object import (
    CardDetails,
    ChargeContext,
    EncryptedCard,
)
from hotel_booking.reservation.domain.entity import Reservation
from hotel_booking.reservation.domain.factory import (
    ReservationCandidate,
    ReservationDetails,
    ReservationFactory,
)
from hotel_booking.reservation.domain.notifier import ReservationNotifier
from hotel_booking.reservation.domain.repository import ReservationRepository
from hotel_booking.reservation.domain.service import (
    ConfirmationNumberAllocator,
    DuplicateReservationGuard,
)
from hotel_booking.reservation.domain.value_object import (
    ConfirmationNumber,
    PaymentDetails,
)
from hotel_booking.shared.domain import Deadline, RetryPolicy, SecretCodec
from hotel_booking.shared.domain.exception import (
    AllocationExhaustedException,
    DuplicateReservationException,
    DuplicateResourceException,
    ValidationException,
)

logger = Logger(child=True)


class CreateReservationService:
    """予約作成ユースケース

    重複チェック → 確認番号の採番 → カード与信 → 永続化 → 通知
    の順に進め、途中で失敗した場合は何も保存しない。
    """

    def __init__(
        self,
        repository: ReservationRepository,
        factory: ReservationFactory,
        duplicate_guard: DuplicateReservationGuard,
        allocator: ConfirmationNumberAllocator,
        authorizer: AuthorizeCardService,
        codec: SecretCodec,
        notifier: ReservationNotifier,
        insert_retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._repository = repository
        self._factory = factory
        self._duplicate_guard = duplicate_guard
        self._allocator = allocator
        self._authorizer = authorizer
        self._codec = codec
        self._notifier = notifier
        self._insert_retry_policy = insert_retry_policy or RetryPolicy(max_attempts=3)

    def create(
        self,
        details: ReservationDetails,
        card: CardDetails | None = None,
        deadline: Deadline | None = None,
    ) -> Reservation:
        """予約を作成する

        Returns:
            Reservation: 保存済みの予約エンティティ
        """
        deadline = deadline or Deadline.unbounded()

        # 1. 入力検証（外部呼び出しの前に行う）
        try:
            candidate = self._factory.build_candidate(details)
        except (KeyError, ValueError) as e:
            raise ValidationException(str(e)) from e
        if candidate.payment_mode.requires_card and card is None:
            raise ValidationException(
                f"Card details are required for payment mode '{candidate.payment_mode.value}'"
            )

        # 2. 重複チェック
        duplicate = self._duplicate_guard.find_duplicate(candidate)
        if duplicate is not None:
            raise DuplicateReservationException(str(duplicate.id))

        # 3. 採番・与信・永続化（確認番号の衝突時は採番し直す）
        reservation = self._save(candidate, card, deadline)

        # 4. 通知（失敗しても予約は取り消さない）
        self._notify(reservation)
        return reservation

    def _save(
        self,
        candidate: ReservationCandidate,
        card: CardDetails | None,
        deadline: Deadline,
    ) -> Reservation:
        """採番した確認番号で与信し、同じ番号で保存する

        与信の請求書番号は必ず保存する確認番号と一致させる。挿入時に番号が
        衝突した場合は採番し直して与信からやり直し、先の与信は確定させずに
        失効に任せる。
        """
        needs_hold = candidate.payment_mode.requires_card and card is not None
        encrypted_card = EncryptedCard.encrypt(card, self._codec) if needs_hold else None
        for attempt in self._insert_retry_policy.attempts():
            confirmation_number = self._allocator.allocate()

            # 与信（カード有効性の確認のみ）
            payment = PaymentDetails.unauthorized()
            if needs_hold:
                hold_reference = self._authorizer.authorize(
                    card, self._charge_context(confirmation_number, candidate), deadline
                )
                payment = PaymentDetails.authorized(encrypted_card, hold_reference)

            reservation = self._factory.create(confirmation_number, candidate, payment)
            try:
                self._repository.save(reservation)
            except DuplicateResourceException:
                logger.warning(
                    "Confirmation number taken at insert, reallocating",
                    extra={
                        "attempt": attempt,
                        "confirmation_number": str(confirmation_number),
                        "abandoned_hold": payment.transaction_id,
                    },
                )
                continue
            logger.info(
                "Reservation created",
                extra={
                    "confirmation_number": str(reservation.id),
                    "hotel_id": reservation.hotel_id,
                    "payment_mode": reservation.payment_mode.value,
                },
            )
            return reservation
        raise AllocationExhaustedException(self._insert_retry_policy.max_attempts)

    def _notify(self, reservation: Reservation) -> None:
        events = reservation.flush_domain_events()
        try:
            self._notifier.publish(reservation, events)
        except Exception:
            logger.exception(
                "Failed to publish reservation notification",
                extra={"confirmation_number": str(reservation.id)},
            )

    @staticmethod
    def _charge_context(
        confirmation_number: ConfirmationNumber, candidate: ReservationCandidate
    ) -> ChargeContext:
        return ChargeContext(
            invoice_number=str(confirmation_number),
            guest_name=candidate.guest.name,
            email=candidate.guest.email,
            nationality=candidate.guest.nationality,
            hotel_id=candidate.hotel_id,
            check_in=candidate.stay_period.check_in.isoformat(),
            check_out=candidate.stay_period.check_out.isoformat(),
            description="Reservation card verification",
        )
