from aws_lambda_powertools import Logger

from hotel_booking.reservation.domain.entity import Reservation
from hotel_booking.reservation.domain.factory import ReservationCandidate
from hotel_booking.reservation.domain.repository import (
    DuplicateCriteria,
    ReservationRepository,
)

logger = Logger(child=True)


class DuplicateReservationGuard:
    """リトライ・二重送信による重複予約を検出する

    ロックを取らないベストエフォートのフィルタであり、同時に届いた
    2 件が両方ともすり抜ける余地は残る。
    """

    def __init__(self, repository: ReservationRepository) -> None:
        self._repository = repository

    def find_duplicate(self, candidate: ReservationCandidate) -> Reservation | None:
        criteria = DuplicateCriteria(
            hotel_id=candidate.hotel_id,
            check_in=candidate.stay_period.check_in,
            check_out=candidate.stay_period.check_out,
            total_amount=candidate.total_amount,
            name_key=candidate.guest.name_key,
            email=candidate.guest.email,
            nationality_key=candidate.guest.nationality_key,
        )
        signature = candidate.rooms.signature()

        for existing in self._repository.find_duplicate_candidates(criteria):
            if existing.guest.phone != candidate.guest.phone:
                continue
            if existing.rooms.signature() != signature:
                continue
            # 未入力同士も一致とみなす
            if existing.guest.reserved_by != candidate.guest.reserved_by:
                continue
            logger.info(
                "Duplicate reservation detected",
                extra={"existing_confirmation_number": str(existing.id)},
            )
            return existing
        return None
