import copy
import threading

from hotel_booking.reservation.domain.entity import Reservation
from hotel_booking.reservation.domain.repository import (
    DuplicateCriteria,
    ReservationRepository,
)
from hotel_booking.reservation.domain.value_object import ConfirmationNumber
from hotel_booking.shared.domain.exception.exceptions import (
    DuplicateResourceException,
    OptimisticLockException,
)


class InMemoryReservationRepository(ReservationRepository):
    """メモリ上の ReservationRepository（ローカル実行・テスト用）

    DynamoDB 実装と同じく、挿入は確認番号の一意性を、更新は version を
    ロックの内側で確認する。保存・取得ではコピーを受け渡す。
    """

    def __init__(self) -> None:
        self._items: dict[str, Reservation] = {}
        self._lock = threading.Lock()

    def save(self, reservation: Reservation) -> None:
        with self._lock:
            key = str(reservation.id)
            if key in self._items:
                raise DuplicateResourceException(f"Reservation already exists: {key}")
            self._items[key] = self._snapshot(reservation)

    def find_by_id(self, confirmation_number: ConfirmationNumber) -> Reservation | None:
        with self._lock:
            stored = self._items.get(str(confirmation_number))
            return copy.deepcopy(stored) if stored is not None else None

    def exists(self, confirmation_number: ConfirmationNumber) -> bool:
        with self._lock:
            return str(confirmation_number) in self._items

    def find_duplicate_candidates(self, criteria: DuplicateCriteria) -> list[Reservation]:
        with self._lock:
            return [
                copy.deepcopy(reservation)
                for reservation in self._items.values()
                if reservation.hotel_id == criteria.hotel_id
                and reservation.stay_period.check_in == criteria.check_in
                and reservation.stay_period.check_out == criteria.check_out
                and reservation.total_amount == criteria.total_amount
                and reservation.guest.name_key == criteria.name_key
                and reservation.guest.email == criteria.email
                and reservation.guest.nationality_key == criteria.nationality_key
            ]

    def update(self, reservation: Reservation, expected_version: int) -> None:
        with self._lock:
            key = str(reservation.id)
            stored = self._items.get(key)
            if stored is None or stored.version != expected_version:
                raise OptimisticLockException(
                    f"Reservation version conflict: "
                    f"expected {expected_version}, confirmation_number={key}"
                )
            self._items[key] = self._snapshot(reservation)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    @staticmethod
    def _snapshot(reservation: Reservation) -> Reservation:
        snapshot = copy.deepcopy(reservation)
        snapshot.flush_domain_events()
        return snapshot
