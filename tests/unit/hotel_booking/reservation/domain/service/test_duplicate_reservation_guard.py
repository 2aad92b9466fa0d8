from decimal import Decimal

from hotel_booking.reservation.domain.factory import ReservationFactory
from hotel_booking.reservation.domain.repository import DuplicateCriteria
from hotel_booking.reservation.domain.service import DuplicateReservationGuard
from hotel_booking.reservation.infrastructure.in_memory_reservation_repository import (
    InMemoryReservationRepository,
)


class TestDuplicateReservationGuard:
    def _guard_with(self, *reservations):
        repository = InMemoryReservationRepository()
        for reservation in reservations:
            repository.save(reservation)
        return DuplicateReservationGuard(repository)

    def test_prefilter_criteria_are_normalized(self, mock_repository, reservation_details):
        mock_repository.find_duplicate_candidates.return_value = []
        candidate = ReservationFactory().build_candidate(reservation_details())

        DuplicateReservationGuard(mock_repository).find_duplicate(candidate)

        criteria = mock_repository.find_duplicate_candidates.call_args[0][0]
        assert isinstance(criteria, DuplicateCriteria)
        assert criteria.hotel_id == "hotel-1"
        assert criteria.name_key == "ahmed ali"
        assert criteria.email == "ahmed@example.com"
        assert criteria.nationality_key == "sa"
        assert criteria.total_amount.amount == Decimal("300.00")

    def test_detects_resubmission_with_different_formatting(
        self, create_reservation, reservation_details
    ):
        existing = create_reservation(phone="966501234567")
        guard = self._guard_with(existing)
        candidate = ReservationFactory().build_candidate(
            reservation_details(
                guest_name="AHMED ALI",
                phone="+٩٦٦ ٥٠ ١٢٣ ٤٥٦٧",
                rooms=[
                    {"room_type": "Double", "display_name": "double room", "count": 1},
                    {"room_type": "double", "display_name": "Double Room", "count": 1},
                ],
            )
        )

        assert guard.find_duplicate(candidate) == existing

    def test_different_phone_is_not_duplicate(self, create_reservation, reservation_details):
        guard = self._guard_with(create_reservation(phone="966501234567"))
        candidate = ReservationFactory().build_candidate(
            reservation_details(phone="+966 50 999 9999")
        )

        assert guard.find_duplicate(candidate) is None

    def test_different_room_signature_is_not_duplicate(
        self, create_reservation, reservation_details
    ):
        guard = self._guard_with(create_reservation(phone="966501234567"))
        candidate = ReservationFactory().build_candidate(
            reservation_details(
                rooms=[{"room_type": "double", "display_name": "Double Room", "count": 3}]
            )
        )

        assert guard.find_duplicate(candidate) is None

    def test_different_total_is_not_duplicate(self, create_reservation, reservation_details):
        guard = self._guard_with(create_reservation(phone="966501234567"))
        candidate = ReservationFactory().build_candidate(
            reservation_details(total_amount=Decimal("301.00"))
        )

        assert guard.find_duplicate(candidate) is None

    def test_attributed_candidate_does_not_match_unattributed_reservation(
        self, create_reservation, reservation_details
    ):
        guard = self._guard_with(create_reservation(phone="966501234567"))
        candidate = ReservationFactory().build_candidate(
            reservation_details(reserved_by="staff-7")
        )

        assert guard.find_duplicate(candidate) is None

    def test_unattributed_candidate_does_not_match_attributed_reservation(
        self, create_reservation, reservation_details
    ):
        guard = self._guard_with(
            create_reservation(phone="966501234567", reserved_by="staff-7")
        )
        candidate = ReservationFactory().build_candidate(reservation_details())

        assert guard.find_duplicate(candidate) is None

    def test_matching_attribution_is_duplicate(self, create_reservation, reservation_details):
        existing = create_reservation(phone="966501234567", reserved_by="Staff-7")
        guard = self._guard_with(existing)
        candidate = ReservationFactory().build_candidate(
            reservation_details(reserved_by="staff-7")
        )

        assert guard.find_duplicate(candidate) == existing
