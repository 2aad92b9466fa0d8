from .reservation_notifier import ReservationNotifier

__all__ = ["ReservationNotifier"]
