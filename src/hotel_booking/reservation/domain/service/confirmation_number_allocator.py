from collections.abc import Callable

from aws_lambda_powertools import Logger

from hotel_booking.reservation.domain.repository import ReservationRepository
from hotel_booking.reservation.domain.value_object import ConfirmationNumber
from hotel_booking.shared.domain import RetryPolicy
from hotel_booking.shared.domain.exception import AllocationExhaustedException

logger = Logger(child=True)


class ConfirmationNumberAllocator:
    """未使用の確認番号を採番する

    ここでの存在確認は事前チェックにすぎない。同時採番による衝突は
    ReservationRepository.save の条件付き書き込みで検出する。
    """

    def __init__(
        self,
        repository: ReservationRepository,
        retry_policy: RetryPolicy | None = None,
        generator: Callable[[], ConfirmationNumber] = ConfirmationNumber.generate,
    ) -> None:
        self._repository = repository
        self._retry_policy = retry_policy or RetryPolicy(max_attempts=5)
        self._generator = generator

    def allocate(self) -> ConfirmationNumber:
        for attempt in self._retry_policy.attempts():
            candidate = self._generator()
            if not self._repository.exists(candidate):
                return candidate
            logger.warning(
                "Confirmation number collision",
                extra={"attempt": attempt, "confirmation_number": str(candidate)},
            )
        raise AllocationExhaustedException(self._retry_policy.max_attempts)
