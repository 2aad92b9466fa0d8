from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from hotel_booking.reservation.domain.entity import Reservation
from hotel_booking.reservation.domain.value_object import ConfirmationNumber
from hotel_booking.shared.domain import Money


@dataclass(frozen=True)
class DuplicateCriteria:
    """重複候補を絞り込むための粗い条件（前段フィルタ）"""

    hotel_id: str
    check_in: date
    check_out: date
    total_amount: Money
    name_key: str
    email: str
    nationality_key: str


class ReservationRepository(ABC):
    """予約リポジトリのインターフェース

    - 予約集約の永続化を抽象化する
    - 更新はすべて version による楽観ロックを通す
    """

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """予約を新規保存する

        確認番号が既に存在する場合は DuplicateResourceException。
        一意性はこの書き込みで原子的に保証する。
        """
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, confirmation_number: ConfirmationNumber) -> Reservation | None:
        """確認番号で検索する"""
        raise NotImplementedError

    @abstractmethod
    def exists(self, confirmation_number: ConfirmationNumber) -> bool:
        """確認番号が使用済みかどうか"""
        raise NotImplementedError

    @abstractmethod
    def find_duplicate_candidates(self, criteria: DuplicateCriteria) -> list[Reservation]:
        """重複の可能性がある予約を返す（大文字小文字を区別しない一致）"""
        raise NotImplementedError

    @abstractmethod
    def update(self, reservation: Reservation, expected_version: int) -> None:
        """保存済みの version が expected_version と一致する場合のみ更新する

        一致しない場合は OptimisticLockException。
        """
        raise NotImplementedError
