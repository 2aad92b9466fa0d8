import pytest

from hotel_booking.reservation.infrastructure.in_memory_reservation_repository import (
    InMemoryReservationRepository,
)
from hotel_booking.shared.domain.exception import (
    DuplicateResourceException,
    OptimisticLockException,
)


class TestInMemoryReservationRepository:
    def test_save_and_find(self, create_reservation):
        repository = InMemoryReservationRepository()
        reservation = create_reservation()

        repository.save(reservation)

        found = repository.find_by_id(reservation.id)
        assert found == reservation
        assert found is not reservation
        assert found.flush_domain_events() == []

    def test_save_duplicate_raises(self, create_reservation):
        repository = InMemoryReservationRepository()
        repository.save(create_reservation())

        with pytest.raises(DuplicateResourceException):
            repository.save(create_reservation())

    def test_update_with_stale_version_raises(self, create_reservation):
        repository = InMemoryReservationRepository()
        repository.save(create_reservation())
        first = repository.find_by_id(create_reservation().id)
        second = repository.find_by_id(create_reservation().id)
        first.release_capture(capturing=False)
        second.release_capture(capturing=False)

        repository.update(first, expected_version=0)
        with pytest.raises(OptimisticLockException):
            repository.update(second, expected_version=0)

    def test_update_missing_raises(self, create_reservation):
        with pytest.raises(OptimisticLockException):
            InMemoryReservationRepository().update(create_reservation(), expected_version=0)
