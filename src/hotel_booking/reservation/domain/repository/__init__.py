from .reservation_repository import DuplicateCriteria, ReservationRepository

__all__ = ["DuplicateCriteria", "ReservationRepository"]
