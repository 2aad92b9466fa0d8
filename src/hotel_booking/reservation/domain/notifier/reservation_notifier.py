from abc import ABC, abstractmethod

from hotel_booking.reservation.domain.entity import Reservation


class ReservationNotifier(ABC):
    """予約確定・請求のお知らせ（メール / PDF / WhatsApp）の送出口

    呼び出し側は失敗をログに残すだけで、作成・請求は巻き戻さない。
    """

    @abstractmethod
    def publish(self, reservation: Reservation, events: list) -> None:
        raise NotImplementedError
